import math

import pandas as pd
import pytest
import uproot

from pyjethadron.process.base.process_io import ProcessIO

from conftest import event_row, jet_row, track_row, constituent_row

def detector_tables():
  events = pd.DataFrame([event_row(1), event_row(2, pos_z=-3.), event_row(3)])
  jets = pd.DataFrame([jet_row(1, 0, 50., 0., 0.5), jet_row(1, 1, 30., -0.3, 0.5 + math.pi),
                       jet_row(2, 0, 20., 0.1, 1.)])
  tracks = pd.DataFrame([track_row(1, 0, 5., 0.1, 0.7), track_row(1, 1, 1., -0.2, 3.5),
                         track_row(2, 0, 2., 0., 1.)])
  constituents = pd.DataFrame([constituent_row(1, 0, 0), constituent_row(1, 1, 1), constituent_row(2, 0, 0)])
  return events, jets, tracks, constituents

def test_build_events():
  events, jets, tracks, constituents = detector_tables()
  records = ProcessIO().build_events(events, jets, tracks, constituents)
  assert len(records) == 3

  first = records[0]
  assert first.collision.key() == (1, 1)
  assert first.collision.multiplicity() == 20
  assert [j.pt() for j in first.jets] == [50., 30.]
  assert len(first.tracks) == 2
  assert first.jets[0].constituents() == (first.tracks[0],)
  assert first.jets[1].constituents()[0].pt() == 1.

  assert records[1].collision.pos_z == -3.
  assert len(records[1].jets) == 1
  assert records[2].jets == ()
  assert records[2].tracks == ()

def test_event_number_max():
  events, jets, tracks, constituents = detector_tables()
  records = ProcessIO(event_number_max=2).build_events(events, jets, tracks, constituents)
  assert len(records) == 2

def test_missing_constituent_table():
  events, jets, tracks, _ = detector_tables()
  records = ProcessIO().build_events(events, jets, tracks)
  assert all(len(j.constituents()) == 0 for j in records[0].jets)

def test_unresolved_constituent():
  events, jets, tracks, constituents = detector_tables()
  constituents = pd.concat([constituents, pd.DataFrame([constituent_row(1, 0, 7)])])
  with pytest.raises(SystemExit):
    ProcessIO().build_events(events, jets, tracks, constituents)

def test_missing_columns():
  events, jets, tracks, _ = detector_tables()
  with pytest.raises(SystemExit):
    ProcessIO().build_events(events.drop(columns=['posZ']), jets, tracks)

def test_duplicate_events():
  events, jets, tracks, _ = detector_tables()
  with pytest.raises(SystemExit):
    ProcessIO().build_events(pd.concat([events, events]), jets, tracks)

def test_build_mc_events():
  mc_events = pd.DataFrame([
    {'mcCollisionId': 7, 'posZ': 1., 'centFT0M': 30., 'multFT0A': 500., 'rho': 2., 'weight': 1.},
    {'mcCollisionId': 8, 'posZ': 2., 'centFT0M': 60., 'multFT0A': 100., 'rho': 1., 'weight': 1.},
  ])
  events = pd.DataFrame([event_row(1, mc_collision_id=7), event_row(2, mc_collision_id=7),
                         event_row(3, mc_collision_id=-1)])
  mc_jets = pd.DataFrame([{'mcCollisionId': 7, 'jet_index': 0, 'pt': 40., 'eta': 0., 'phi': 1., 'area': 0.5, 'r': 40}])
  particles = pd.DataFrame([{'mcCollisionId': 7, 'particle_index': 3, 'pt': 2., 'eta': 0.1, 'phi': 1.1},
                            {'mcCollisionId': 8, 'particle_index': 0, 'pt': 1., 'eta': 0.2, 'phi': 2.}])
  mc_constituents = pd.DataFrame([{'mcCollisionId': 7, 'jet_index': 0, 'particle_index': 3}])

  records = ProcessIO().build_mc_events(mc_events, events, mc_jets, particles, mc_constituents)
  assert len(records) == 2
  first = records[0]
  assert first.mc_collision.ev_id == 7
  assert first.mc_collision.multiplicity() == 500.
  assert [c.ev_id for c in first.collisions] == [1, 2]
  assert first.jets[0].constituents() == (first.particles[0],)
  assert records[1].collisions == ()
  assert records[1].jets == ()
  assert len(records[1].particles) == 1

def test_load_events_from_root_file(tmp_path):
  events, jets, tracks, constituents = detector_tables()
  input_file = str(tmp_path / 'trees.root')
  with uproot.recreate(input_file) as f:
    f['tree_event'] = events
    f['tree_jet'] = jets
    f['tree_track'] = tracks
    f['tree_jet_constituent'] = constituents

  io = ProcessIO(input_file=input_file)
  records = io.load_events()
  assert len(records) == 3
  assert len(records[0].jets[0].constituents()) == 1
  assert io.load_dataframe('tree_d0', required=False) is None
  with pytest.raises(SystemExit):
    io.load_dataframe('tree_d0')
