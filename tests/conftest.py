"""
  Shared fixtures and object builders for the jet-hadron tests.
"""

import pytest

from pyjethadron.process.base.event_info import Jet, Track, Particle, Collision, McCollision
from pyjethadron.process.base.histogram_registry import HistogramRegistry
from pyjethadron.process.base.process_utils import ProcessUtils
from pyjethadron.process.base.settings import AnalysisSettings, EVENT_SELECTION_BITS, TRACK_SELECTION_BITS

SEL8 = 1 << EVENT_SELECTION_BITS['sel8']
GLOBAL_TRACK = 1 << TRACK_SELECTION_BITS['globalTracks']

def make_settings(**kwargs):
  settings = AnalysisSettings(name='settings')
  settings.configure_from_dict(kwargs)
  return settings.validate()

def make_jet(pt, eta=0., phi=0., area=0.4, r=40, constituents=(), event_weight=1.):
  return Jet(pt, eta, phi, area, r, constituents=constituents, event_weight=event_weight)

def make_track(pt=5., eta=0., phi=0., track_sel=GLOBAL_TRACK, index=-1):
  return Track(pt, eta, phi, index=index, track_sel=track_sel)

def make_particle(pt=5., eta=0., phi=0., index=-1):
  return Particle(pt, eta, phi, index=index)

def make_collision(ev_id=0, pos_z=0., mult=20, cent=30., rho=0., event_sel=SEL8, **kwargs):
  return Collision(run_number=1, ev_id=ev_id, pos_z=pos_z, cent_ft0c=cent, cent_ft0a=cent, cent_ft0m=cent,
                   mult_ntracks_global=mult, rho=rho, event_sel=event_sel, **kwargs)

def make_mc_collision(ev_id=0, pos_z=0., cent=30., rho=0., weight=1.):
  return McCollision(ev_id=ev_id, pos_z=pos_z, cent_ft0m=cent, rho=rho, weight=weight)

@pytest.fixture
def settings():
  return make_settings()

@pytest.fixture
def utils(settings):
  return ProcessUtils(settings=settings)

@pytest.fixture
def registry():
  return HistogramRegistry(name='test_registry')

#---------------------------------------------------------------
# Table rows as written by the tree producer
#---------------------------------------------------------------
def event_row(ev_id, pos_z=1., cent=30., mult=20, event_sel=SEL8, rho=0., occupancy=100, weight=1.,
              mc_collision_id=None):
  row = {'run_number': 1, 'ev_id': ev_id, 'posZ': pos_z, 'centFT0C': cent, 'centFT0A': cent, 'centFT0M': cent,
         'multFT0M': 10. * mult, 'multNTracksGlobal': mult, 'occupancy': occupancy, 'rho': rho,
         'weight': weight, 'eventSel': event_sel, 'isMBGap': 0}
  if mc_collision_id is not None:
    row['mcCollisionId'] = mc_collision_id
  return row

def jet_row(ev_id, jet_index, pt, eta, phi, area=0.4, r=40):
  return {'run_number': 1, 'ev_id': ev_id, 'jet_index': jet_index, 'pt': pt, 'eta': eta, 'phi': phi,
          'area': area, 'r': r}

def track_row(ev_id, track_index, pt, eta, phi, track_sel=GLOBAL_TRACK):
  return {'run_number': 1, 'ev_id': ev_id, 'track_index': track_index, 'pt': pt, 'eta': eta, 'phi': phi,
          'trackSel': track_sel}

def constituent_row(ev_id, jet_index, track_index):
  return {'run_number': 1, 'ev_id': ev_id, 'jet_index': jet_index, 'track_index': track_index}
