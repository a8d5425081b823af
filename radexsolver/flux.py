# -*- coding: utf-8 -*-
"""
Observable line quantities (antenna and radiation temperature, integrated
fluxes) computed from the solved level populations
"""
from collections import namedtuple
import numpy as np
from radexsolver import helpers

LineResult = namedtuple('LineResult',['name','up','low','frequency','Eup','Tex','tau',
                                      'T_antenna','T_R','flux_Kkms','flux_cgs'])
LineResult.__doc__ = r'''Results for one radiative transition.

    Fields: name (upper-lower level label), up and low (level indices),
    frequency [GHz], Eup (upper level energy [K]), Tex [K], tau, T_antenna [K]
    (antenna temperature in excess of the background), T_R [K] (radiation
    temperature), flux_Kkms [K km/s] and flux_cgs [erg/s/cm\ :sup:`2`]'''

#frequency margin [MHz] for the selection of lines
default_margin = 10
#hyperfine components can be closely spaced
hfs_margin = 0.001


def frequency_margin(molecule_name):
    return hfs_margin if molecule_name.endswith('_hfs') else default_margin

def is_in_range(freq,fmin,fmax,margin=default_margin):
    '''Returns True if the frequency freq [GHz] is within [fmin,fmax] or closer
    than margin [MHz] to one of the two limits.'''
    if abs(freq-fmin)*1000 < margin or abs(freq-fmax)*1000 < margin:
        return True
    return fmin <= freq <= fmax

def source_function(xnu,Tex):
    '''Planck function at the excitation temperature, zero where h*nu/(k*Tex)
    exceeds MAX_EXP_ARGUMENT'''
    with np.errstate(over='ignore',divide='ignore',invalid='ignore'):
        x = helpers.fk*xnu/Tex
        return np.where(x >= helpers.MAX_EXP_ARGUMENT,0,
                        helpers.thc*xnu**3/(np.exp(np.minimum(x,helpers.MAX_EXP_ARGUMENT))-1))

def antenna_temperature(xnu,tau,Tex,backi):
    '''Line brightness in excess of the background, expressed as
    Rayleigh-Jeans temperature [K]'''
    bnutex = source_function(xnu=xnu,Tex=Tex)
    ftau = np.where(np.abs(tau) <= 300,np.exp(-np.clip(tau,-300,300)),0)
    toti = backi*ftau + bnutex*(1-ftau)
    with np.errstate(divide='ignore'):
        tback = np.where(backi==0,0,
                         helpers.fk*xnu/np.log(helpers.thc*xnu**3/backi+1))
    #a background with T << h*nu/k is not subtracted
    ta = np.where(np.abs(tback/(helpers.fk*xnu)) <= 0.02,toti,toti-backi)
    return ta/(helpers.thc*xnu**2/helpers.fk)

def radiation_temperature(xnu,Tex,totalb,beta):
    '''Radiation temperature [K] of the line: Planck inversion of the mean
    intensity inside the cloud'''
    bnutex = source_function(xnu=xnu,Tex=Tex)
    bnu = totalb*beta + (1-beta)*bnutex
    return helpers.brightness_temperature(bnu,xnu)

def synthesize(molecule,tau,Tex,backi,totalb,beta,width_v,fmin,fmax):
    '''Computes the observables of the lines within the frequency range.

    Args:
        molecule (radexsolver.molecule.Molecule): the molecule
        tau (numpy.ndarray): optical depth of all lines
        Tex (numpy.ndarray): excitation temperature of all lines in [K]
        backi (numpy.ndarray): background intensity at the lines
        totalb (numpy.ndarray): total background field at the lines
        beta (numpy.ndarray): escape probability of all lines
        width_v (:obj:`float`): line width in [cm/s]
        fmin, fmax (:obj:`float`): frequency range in [GHz]

    Returns:
        list: a LineResult for each line within the frequency range, in the
        order of the data file
    '''
    xnu = molecule.xnu
    ta = antenna_temperature(xnu=xnu,tau=tau,Tex=Tex,backi=backi)
    tr = radiation_temperature(xnu=xnu,Tex=Tex,totalb=totalb,beta=beta)
    kkms = 1.0645*width_v*ta
    ergs = helpers.fgaus*helpers.k*width_v*ta*xnu**3
    margin = frequency_margin(molecule.name)
    results = []
    for i,line in enumerate(molecule.rad_transitions):
        if not is_in_range(freq=line.nu0,fmin=fmin,fmax=fmax,margin=margin):
            continue
        results.append(LineResult(name=line.name,up=line.up.number,low=line.low.number,
                                  frequency=line.nu0,Eup=line.Eup,Tex=Tex[i],
                                  tau=tau[i],T_antenna=ta[i],T_R=tr[i],
                                  flux_Kkms=kkms[i]/1e5,flux_cgs=ergs[i]))
    return results
