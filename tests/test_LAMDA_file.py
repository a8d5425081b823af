# -*- coding: utf-8 -*-
"""
Tests of the reader for LAMDA files
"""
import os
from radexsolver import LAMDA_file,helpers
from radexsolver.exceptions import DataFormatError
import numpy as np
import pytest

here = os.path.dirname(os.path.abspath(__file__))
lamda_folder = os.path.join(here,'LAMDA_files')
co_filepath = os.path.join(lamda_folder,'co.dat')
co_data = LAMDA_file.read(co_filepath)


def test_levels():
    levels = co_data['levels']
    assert len(levels) == 11
    for i,level in enumerate(levels):
        assert level.number == i
        assert level.g == 2*i+1
        assert level.label == str(i)
    assert levels[0].E == 0
    assert levels[1].E == 3.845033413
    assert np.isclose(levels[1].E_K,5.53,rtol=1e-3)

def test_radiative_transitions():
    rad_trans = co_data['radiative transitions']
    assert len(rad_trans) == 10
    first = rad_trans[0]
    assert first.up.number == 1
    assert first.low.number == 0
    assert first.A21 == 7.203e-08
    assert first.nu0 == 115.2712018
    assert first.Eup == 5.53
    assert first.name == '1-0'
    assert rad_trans[-1].name == '10-9'
    for trans in rad_trans:
        assert np.isclose(trans.Delta_E*helpers.wavenumber_to_GHz,trans.nu0,rtol=1e-4)

def test_collisional_transitions():
    coll_trans = co_data['collisional transitions']
    assert sorted(coll_trans.keys()) == ['ortho-H2','para-H2']
    for transitions in coll_trans.values():
        assert len(transitions) == 55
        for trans in transitions:
            assert np.all(trans.Tkin_data == np.array((10,20,50,100)))
            assert trans.K21_data.size == 4
            assert trans.up.E > trans.low.E
    para = coll_trans['para-H2'][0]
    ortho = coll_trans['ortho-H2'][0]
    assert (para.up.number,para.low.number) == (1,0)
    assert np.allclose(ortho.K21_data/para.K21_data,1.3,rtol=1e-2)

def test_molecule_name():
    assert co_data['molecule'].startswith('CO')

def test_optional_frequency_columns():
    lines = ['!MOLECULE','test','!WEIGHT','2.0','!NUMBER OF LEVELS','2',
             '1 0.0 1.0','2 3.845033413 3.0','!NUMBER OF LINES','1',
             '1 2 1 7.2e-8','!NUMBER OF PARTNERS','0']
    data = LAMDA_file.parse(lines)
    line = data['radiative transitions'][0]
    assert np.isclose(line.nu0,115.27,rtol=1e-4)
    assert np.isclose(line.Eup,5.532,rtol=1e-3)
    assert data['levels'][1].label == '2'
    assert data['collisional transitions'] == {}

def write_broken_copy(tmp_path,replace_line,new_content):
    with open(co_filepath) as f:
        lines = f.readlines()
    lines[replace_line] = new_content
    filepath = tmp_path/'broken.dat'
    filepath.write_text(''.join(lines))
    return str(filepath)

def test_broken_files(tmp_path):
    #number of levels not an integer
    broken = write_broken_copy(tmp_path,5,'eleven\n')
    with pytest.raises(DataFormatError):
        LAMDA_file.read(broken)
    #unknown collision partner identifier
    broken = write_broken_copy(tmp_path,34,'9 unknown partner\n')
    with pytest.raises(DataFormatError):
        LAMDA_file.read(broken)
    #level numbers in the file start at 1
    for i,content in ((21,'    1     2     0    7.203e-08      115.2712018        5.53\n'),
                      (42,'    1     0     1  4.543e-11  5.218e-11  6.268e-11  7.200e-11\n'),
                      (21,'    1    12     1    7.203e-08      115.2712018        5.53\n')):
        broken = write_broken_copy(tmp_path,i,content)
        with pytest.raises(DataFormatError):
            LAMDA_file.read(broken)
    #truncated file
    truncated = tmp_path/'truncated.dat'
    with open(co_filepath) as f:
        truncated.write_text(''.join(f.readlines()[:60]))
    with pytest.raises(DataFormatError):
        LAMDA_file.read(str(truncated))

def test_missing_file():
    with pytest.raises(DataFormatError):
        LAMDA_file.read(os.path.join(lamda_folder,'does_not_exist.dat'))

def test_error_chaining(tmp_path):
    broken = write_broken_copy(tmp_path,5,'eleven\n')
    with pytest.raises(DataFormatError) as excinfo:
        LAMDA_file.read(broken)
    assert isinstance(excinfo.value.__cause__,ValueError)
