# -*- coding: utf-8 -*-
"""
Errors and warnings raised while setting up or solving a RADEX calculation
"""
import warnings


class RadexError(Exception):
    '''Base class of all errors raised by radexsolver'''


class InvalidConfigurationError(RadexError,ValueError):

    '''An input parameter is out of range or inconsistent.

    Attributes:
        field (:obj:`str`): name of the offending parameter
        value: the offending value
    '''

    def __init__(self,message,field=None,value=None):
        RadexError.__init__(self,message)
        self.field = field
        self.value = value


class UnsupportedMoleculeError(InvalidConfigurationError):
    '''No data exist for the requested molecule / catalog combination'''


class DataFormatError(RadexError,ValueError):
    '''The molecular data resource is missing or cannot be parsed'''


class NoCollisionPartnerError(RadexError,RuntimeError):
    '''None of the requested collision partners has data and non-zero density'''


class ConvergenceError(RadexError,RuntimeError):

    '''The iteration of the level populations did not converge.

    Attributes:
        n_iter (:obj:`int`): number of iterations performed
    '''

    def __init__(self,message,n_iter=None):
        RadexError.__init__(self,message)
        self.n_iter = n_iter


class RadexWarning(UserWarning):
    '''Non-fatal anomaly encountered during a calculation'''


class WarningCollector():

    '''Collects the warnings of one calculation so that they can be retrieved
    after the calculation finished. Every warning is also emitted with
    warnings.warn.'''

    def __init__(self):
        self.messages = []

    def warn(self,message):
        self.messages.append(message)
        warnings.warn(message,RadexWarning,stacklevel=3)

    def clear(self):
        self.messages = []

    def __len__(self):
        return len(self.messages)

    def __iter__(self):
        return iter(self.messages)
