# -*- coding: utf-8 -*-
"""
Levels and transitions of an atom or molecule as read from a LAMDA file
"""

from radexsolver import helpers
import numpy as np


def interpolate_K21(Tkin,Tkin_data,K21_data):
    r'''Linear interpolation of tabulated downward collision rate coefficients.

    Args:
        Tkin (:obj:`float`): kinetic temperature in [K]
        Tkin_data (numpy.ndarray): the tabulated temperatures, in increasing order
        K21_data (numpy.ndarray): tabulated rate coefficients; the last axis
            corresponds to Tkin_data

    Returns:
        tuple: the rate coefficients at Tkin, and an integer that is -1 if Tkin
        is below the tabulated range, +1 if it is above and 0 otherwise. Outside
        the tabulated range, the rates of the closest tabulated temperature are
        returned.
    '''
    if Tkin_data.size <= 1:
        return K21_data[...,0],0
    if Tkin <= Tkin_data[0]:
        return K21_data[...,0],0 if Tkin==Tkin_data[0] else -1
    if Tkin >= Tkin_data[-1]:
        return K21_data[...,-1],0 if Tkin==Tkin_data[-1] else 1
    #Tkin_data[nint] < Tkin <= Tkin_data[nint+1]
    nint = np.searchsorted(Tkin_data,Tkin,side='left') - 1
    T_low,T_up = Tkin_data[nint],Tkin_data[nint+1]
    fint = (Tkin-T_low)/(T_up-T_low)
    K_low = K21_data[...,nint]
    K21 = K_low + fint*(K21_data[...,nint+1]-K_low)
    #do not let the interpolation produce negative rates
    K21 = np.where(K21<0,K_low,K21)
    return K21,0


class Level():
    r'''Represents an atomic / molecular level.

    Attributes:
        g (:obj:`float`): the statistical weight of the level
        E (:obj:`float`): the term energy of the level in [cm\ :sup:`-1`]
        number (:obj:`int`): the number of the level, starting at 0
        label (:obj:`str`): quantum numbers of the level as given in the file
    '''

    def __init__(self,g,E,number,label=None):
        self.g = g
        self.E = E
        self.number = number
        self.label = str(number+1) if label is None else label

    @property
    def E_K(self):
        '''term energy expressed as temperature in [K]'''
        return self.E*helpers.fk


class Transition():

    def __init__(self,up,low):
        self.up = up
        self.low = low
        #wavenumber in [cm-1]
        self.Delta_E = self.up.E-self.low.E
        self.name = f'{self.up.label}-{self.low.label}'


class RadiativeTransition(Transition):

    r'''Represents the radiative transition between two energy levels.

    Attributes:
        up (radexsolver.atomic_transition.Level): the upper level of the transition
        low (radexsolver.atomic_transition.Level): the lower level of the transition
        Delta_E (:obj:`float`): the wavenumber of the transition in [cm\ :sup:`-1`],
            computed from the level energies
        name (:obj:`str`): name of the transition
        A21 (:obj:`float`): Einstein A21 coefficient in [s\ :sup:`-1`]
        nu0 (:obj:`float`): rest frequency in [GHz]
        Eup (:obj:`float`): energy of the upper level in [K]
    '''

    def __init__(self,up,low,A21,nu0=None,Eup=None):
        Transition.__init__(self,up=up,low=low)
        if not self.Delta_E > 0:
            raise ValueError(f'transition {self.name}: upper level is not above'
                             +' the lower level')
        self.A21 = A21
        #frequency listed in the file if available
        self.nu0 = self.Delta_E*helpers.wavenumber_to_GHz if nu0 is None else nu0
        self.Eup = self.up.E_K if Eup is None else Eup


class CollisionalTransition(Transition):

    r'''Represents the collisional transition between two energy levels

    Attributes:
        up (radexsolver.atomic_transition.Level): the upper level of the transition
        low (radexsolver.atomic_transition.Level): the lower level of the transition
        K21_data (numpy.ndarray): downward rate coefficients in
            [cm\ :sup:`3`/s] at the temperatures Tkin_data
        Tkin_data (numpy.ndarray): temperatures in [K]
    '''

    def __init__(self,up,low,K21_data,Tkin_data):
        Transition.__init__(self,up=up,low=low)
        if np.any(K21_data < 0):
            raise ValueError(f'negative collision rate for transition {self.name}')
        self.K21_data = K21_data
        self.Tkin_data = Tkin_data
