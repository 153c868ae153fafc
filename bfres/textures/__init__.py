from .texture import Texture
