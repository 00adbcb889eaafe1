import pytest

from pyjethadron.process.base.event_info import Collision, McCollision, Jet, CENT_FT0C, CENT_FT0A, CENT_FT0M

def test_collision_estimators():
  collision = Collision(cent_ft0c=10., cent_ft0a=20., cent_ft0m=30., mult_ntracks_global=42)
  assert collision.centrality(CENT_FT0C) == 10.
  assert collision.centrality(CENT_FT0A) == 20.
  assert collision.centrality(CENT_FT0M) == 30.
  assert collision.centrality() == 30.
  assert collision.multiplicity() == 42
  assert not collision.has_mc_collision()

def test_mc_collision_observables():
  mc_collision = McCollision(ev_id=3, cent_ft0m=15., mult_ft0a=800.)
  assert mc_collision.centrality() == 15.
  assert mc_collision.multiplicity() == 800.
  assert mc_collision.key() == (0, 3)

def test_jet_corrected_pt():
  jet = Jet(40., 0.1, 1., 0.5, 40)
  assert jet.pt_corr(0.) == 40.
  assert jet.pt_corr(10.) == pytest.approx(35.)
  assert jet.r() == 40
  assert jet.constituents() == ()
