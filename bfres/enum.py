from enum import Flag


class Compliant(Flag):
    '''It indicates which degree of compliantness the data must reflect the format:
    signatures are always checked, values outside of the enums only with ENUM.'''
    NONE  = 0
    ENUM  = 1 << 0
