# -*- coding: utf-8 -*-
"""
Continuum radiation incident on the cloud, evaluated at the line frequencies
"""
import numpy as np
import numba as nb
from radexsolver import helpers
from radexsolver.exceptions import InvalidConfigurationError

T_CMB = 2.725
#upper validity limit [cm-1] of the Galactic background fit (Lyman limit of H)
lyman_limit = 109678.76


@nb.jit(nopython=True,cache=True)
def galactic_intensity(xnu):
    r'''Mean Galactic background radiation field plus CMB (Black 1994, revised).

    Args:
        xnu (numpy.ndarray): wavenumber in [cm\ :sup:`-1`]

    Returns:
        numpy.ndarray: intensity in [erg/s/cm\ :sup:`2`/Hz/sr]. Beyond the
        Lyman limit, the fit is not valid and 0 is returned.
    '''
    intensity = np.zeros(xnu.size)
    for i in range(xnu.size):
        x = xnu[i]
        aa = helpers.thc*x**3
        hnuk = helpers.fk*x/T_CMB
        cbi = 0.
        if x <= 10.:
            cbi = aa/(np.exp(hnuk)-1)
            #synchrotron
            cmi = 0.3*1.767e-19/x**0.75
        elif x <= 104.98:
            cbi = aa/(np.exp(hnuk)-1)
            #COBE single-temperature dust
            cmib = aa/(np.exp(helpers.fk*x/23.3)-1)
            cmi = 0.3*5.846e-7*x**1.65*cmib
        elif x <= 1113.126:
            cmi = 1.3853e-12*x**-1.8381
        elif x <= 4461.40:
            cmi = 1e-18*(18.213601-0.023017717*x+1.1029705e-5*x**2-2.1887383e-9*x**3
                         +1.5728533e-13*x**4)
        elif x <= 8333.33:
            cmi = 1e-18*(-2.4304726+0.0020261152*x-2.0830715e-7*x**2+6.1703393e-12*x**3)
        elif x <= 14286.:
            cmi = 10**(-17.092474-4.2153656e-5*x)
        elif x <= 40000.:
            xla = 1e8/x
            ylg = -1.7506877e-14*xla**4+3.9030189e-10*xla**3+3.1282174e-7*xla**2\
                  -3.0189024e-3*xla+2.0845155
            cmi = 1.581e-24*x*ylg
        elif x <= 55556.:
            xla = 1e8/x
            cmi = 1.581e-24*x*(-0.56020085+9.806303e-4*xla)
        elif x <= 90909.:
            xla = 1e8/x
            cmi = 1.581e-25*x*(-21.822255+3.2072800e-2*xla-7.3408518e-6*xla**2)
        elif x <= lyman_limit:
            xla = 1e8/x
            cmi = 1.581e-25*x*(30.955076-7.3393509e-2*xla+4.4906433e-5*xla**2)
        else:
            cmi = 0.
        intensity[i] = cbi+cmi
    return intensity


def background_field(xnu,Tbg,warnings):
    r'''Computes the background radiation field at the line frequencies.

    Args:
        xnu (numpy.ndarray): wavenumbers of the lines in [cm\ :sup:`-1`]
        Tbg (:obj:`float`): background temperature in [K]. For Tbg > 0, the
            background is a black body at Tbg. For Tbg = 0, the mean Galactic
            background (including the CMB) is used.
        warnings (radexsolver.exceptions.WarningCollector): receives a warning
            for lines beyond the validity range of the Galactic background

    Returns:
        tuple: the intensity of the background in
        [erg/s/cm\ :sup:`2`/Hz/sr], its brightness temperature in [K] and
        the total background field felt by the molecules (identical to the
        intensity)
    '''
    if Tbg < 0:
        raise InvalidConfigurationError('background temperature cannot be negative',
                                        field='Tbg',value=Tbg)
    if Tbg > 0:
        backi = helpers.B_nu(xnu,float(Tbg))
        trj = np.ones_like(xnu)*Tbg
    else:
        backi = galactic_intensity(xnu)
        for x in xnu[xnu>lyman_limit]:
            warnings.warn(f'xnu = {x} cm-1 is outside the range of the Galactic'
                          +' background fit and beyond the Lyman limit')
        #zero intensity would give a zero brightness temperature and then
        #infinite excitation temperatures
        backi = np.where(backi>0,backi,helpers.EPS)
        trj = helpers.fk*xnu/np.log(1+helpers.thc*xnu**3/backi)
    totalb = backi.copy()
    return backi,trj,totalb
