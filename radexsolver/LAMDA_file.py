# -*- coding: utf-8 -*-
"""
Reader for molecular data files in the LAMDA format (as used by RADEX)
"""
from radexsolver import atomic_transition
from radexsolver.exceptions import DataFormatError
import numpy as np

#identifiers used in the LAMDA database files:
LAMDA_coll_ID = {1:'H2',2:'para-H2',3:'ortho-H2',4:'e',5:'H',6:'He',7:'H+'}


def is_comment(line):
    return line.strip().startswith('!')

def data_lines(lines):
    return [line for line in lines if line.strip() != '' and not is_comment(line)]

def level(levels,entry):
    '''level referenced by its 1-based number in the file'''
    number = int(entry)
    if not 1 <= number <= len(levels):
        raise ValueError(f'invalid level number {number}')
    return levels[number-1]

def read(datafilepath):
    '''
    Read a LAMDA data file.

    The LAMDA format is described at https://home.strw.leidenuniv.nl/~moldata/molformat.html

    Parameters
    ----------
    datafilepath : str
        path to the file

    Returns
    -------
    dict
        Dictionary containing the data read from the file (see parse).

    Raises
    ------
    DataFormatError
        If the file does not exist or cannot be parsed.
    '''
    try:
        with open(datafilepath,'r') as datafile:
            lines = datafile.readlines()
    except OSError as err:
        raise DataFormatError(f'cannot read molecular data file {datafilepath}') from err
    return parse(lines,source=datafilepath)

def parse(lines,source='<lines>'):
    '''
    Parse the lines of a LAMDA data file.

    Returns
    -------
    dict
        Dictionary with the following keys:

        - 'molecule': name of the molecule given in the file

        - 'levels': list of levels (instances of the Level class)

        - 'radiative transitions': list of radiative transitions (instances
          of the RadiativeTransition class)

        - 'collisional transitions': dict, containing lists of instances of
          the CollisionalTransition class for each collision partner appearing
          in the file

        The elements of these lists are in the order they appear in the file
    '''
    try:
        return _parse(data_lines(lines))
    except (ValueError,IndexError,KeyError,StopIteration) as err:
        raise DataFormatError(f'invalid molecular data in {source}: {err}') from err

def _parse(lines):
    lines = iter(lines)
    molecule = next(lines).strip()
    next(lines) #molecular weight
    n_levels = int(next(lines).split()[0])
    levels = []
    for i in range(n_levels):
        entries = next(lines).split()
        number = int(entries[0])
        if number != i+1:
            raise ValueError('level numeration not consistent')
        label = entries[3] if len(entries) > 3 else None
        levels.append(atomic_transition.Level(g=float(entries[2]),E=float(entries[1]),
                                              number=i,label=label))
    n_rad_transitions = int(next(lines).split()[0])
    rad_transitions = []
    for i in range(n_rad_transitions):
        entries = next(lines).split()
        kwargs = {'up':level(levels,entries[1]),'low':level(levels,entries[2]),
                  'A21':float(entries[3])}
        #frequency [GHz] and upper level energy [K] are optional in the LAMDA format
        if len(entries) > 4:
            kwargs['nu0'] = float(entries[4])
        if len(entries) > 5:
            kwargs['Eup'] = float(entries[5])
        rad_transitions.append(atomic_transition.RadiativeTransition(**kwargs))
    n_partners = int(next(lines).split()[0])
    coll_transitions = {}
    for i in range(n_partners):
        coll_ID = LAMDA_coll_ID[int(next(lines).split()[0])]
        n_coll_transitions = int(next(lines).split()[0])
        n_temperatures = int(next(lines).split()[0])
        temperatures = np.array([float(T) for T in next(lines).split()])
        if temperatures.size != n_temperatures:
            raise ValueError(f'expected {n_temperatures} temperatures for {coll_ID}')
        if np.any(np.diff(temperatures) <= 0):
            raise ValueError(f'temperatures for {coll_ID} not increasing')
        transitions = []
        for j in range(n_coll_transitions):
            entries = next(lines).split()
            K21_data = np.array([float(K) for K in entries[3:]])
            if K21_data.size != n_temperatures:
                raise ValueError(f'expected {n_temperatures} rates for collisional'
                                 +f' transition {j+1} of {coll_ID}')
            transitions.append(atomic_transition.CollisionalTransition(
                                   up=level(levels,entries[1]),
                                   low=level(levels,entries[2]),
                                   K21_data=K21_data,Tkin_data=temperatures))
        coll_transitions[coll_ID] = transitions
    return {'molecule':molecule,'levels':levels,'radiative transitions':rad_transitions,
            'collisional transitions':coll_transitions}
