from .hanko import Hanko, HankoType

__all__ = ['Hanko', 'HankoType']
