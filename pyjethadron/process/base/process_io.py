#!/usr/bin/env python3

"""
  Analysis IO class for the jet-hadron analysis.

  Reads flat tables (one ROOT TTree per table) with uproot into pandas
  dataframes and groups them into per-event records:
    detector level: event, jet, jet constituent, track and D0 candidate tables,
                    keyed on (run_number, ev_id)
    particle level: mc event, mc jet, mc jet constituent and particle tables,
                    keyed on mcCollisionId; reconstructed events point to
                    their mc event through their mcCollisionId column
  Dataframes can also be handed over directly (build_events, build_mc_events).
"""

import sys

import uproot

from pyjethadron.mputils import pinfo, pwarning
from pyjethadron.process.base import common_base
from pyjethadron.process.base import event_info

UNIQUE_IDENTIFIER = ['run_number', 'ev_id']
MC_IDENTIFIER = ['mcCollisionId']

EVENT_COLUMNS = UNIQUE_IDENTIFIER + ['posZ', 'centFT0C', 'centFT0A', 'centFT0M', 'multFT0M',
                                     'multNTracksGlobal', 'occupancy', 'rho', 'weight', 'eventSel', 'isMBGap']
JET_COLUMNS = UNIQUE_IDENTIFIER + ['jet_index', 'pt', 'eta', 'phi', 'area', 'r']
CONSTITUENT_COLUMNS = UNIQUE_IDENTIFIER + ['jet_index', 'track_index']
TRACK_COLUMNS = UNIQUE_IDENTIFIER + ['track_index', 'pt', 'eta', 'phi', 'trackSel']
D0_COLUMNS = UNIQUE_IDENTIFIER + ['pt', 'eta', 'phi', 'm']

MC_EVENT_COLUMNS = MC_IDENTIFIER + ['posZ', 'centFT0M', 'multFT0A', 'rho', 'weight']
MC_JET_COLUMNS = MC_IDENTIFIER + ['jet_index', 'pt', 'eta', 'phi', 'area', 'r']
MC_CONSTITUENT_COLUMNS = MC_IDENTIFIER + ['jet_index', 'particle_index']
PARTICLE_COLUMNS = MC_IDENTIFIER + ['particle_index', 'pt', 'eta', 'phi']

################################################################
class ProcessIO(common_base.CommonBase):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, input_file='', tree_dir='', event_tree_name='tree_event', jet_tree_name='tree_jet',
               constituent_tree_name='tree_jet_constituent', track_tree_name='tree_track',
               d0_tree_name='tree_d0', mc_event_tree_name='tree_mc_event', mc_jet_tree_name='tree_mc_jet',
               mc_constituent_tree_name='tree_mc_jet_constituent', particle_tree_name='tree_particle',
               event_number_max=sys.maxsize, **kwargs):
    super(ProcessIO, self).__init__(**kwargs)
    self.input_file = input_file
    self.tree_dir = tree_dir
    if len(tree_dir) and tree_dir[-1] != '/':
      self.tree_dir += '/'
    self.event_tree_name = event_tree_name
    self.jet_tree_name = jet_tree_name
    self.constituent_tree_name = constituent_tree_name
    self.track_tree_name = track_tree_name
    self.d0_tree_name = d0_tree_name
    self.mc_event_tree_name = mc_event_tree_name
    self.mc_jet_tree_name = mc_jet_tree_name
    self.mc_constituent_tree_name = mc_constituent_tree_name
    self.particle_tree_name = particle_tree_name
    self.event_number_max = event_number_max

  #---------------------------------------------------------------
  # Convert a ROOT TTree to a pandas dataframe.
  # Missing optional trees return None.
  #---------------------------------------------------------------
  def load_dataframe(self, tree_name, required=True):

    full_name = self.tree_dir + tree_name
    with uproot.open(self.input_file) as f:
      if full_name not in f:
        if required:
          sys.exit('ProcessIO::load_dataframe: Tree {} not found in file {}'.format(full_name, self.input_file))
        pwarning('Tree {} not found in file {}, skipping'.format(full_name, self.input_file))
        return None
      df = f[full_name].arrays(library='pd')

    print('    {}: {} rows'.format(tree_name, len(df.index)))
    return df

  #---------------------------------------------------------------
  # Load detector-level tables and group them per event
  #---------------------------------------------------------------
  def load_events(self, load_d0=False):
    print('Convert ROOT trees to pandas dataframes...')
    event_df = self.load_dataframe(self.event_tree_name)
    jet_df = self.load_dataframe(self.jet_tree_name)
    constituent_df = self.load_dataframe(self.constituent_tree_name, required=False)
    track_df = self.load_dataframe(self.track_tree_name)
    d0_df = self.load_dataframe(self.d0_tree_name) if load_d0 else None
    return self.build_events(event_df, jet_df, track_df, constituent_df, d0_df)

  #---------------------------------------------------------------
  # Load particle-level tables (and the reconstructed events) and group
  # them per mc event
  #---------------------------------------------------------------
  def load_mc_events(self):
    print('Convert ROOT trees to pandas dataframes...')
    mc_event_df = self.load_dataframe(self.mc_event_tree_name)
    event_df = self.load_dataframe(self.event_tree_name)
    mc_jet_df = self.load_dataframe(self.mc_jet_tree_name)
    mc_constituent_df = self.load_dataframe(self.mc_constituent_tree_name, required=False)
    particle_df = self.load_dataframe(self.particle_tree_name)
    return self.build_mc_events(mc_event_df, event_df, mc_jet_df, particle_df, mc_constituent_df)

  #---------------------------------------------------------------
  # Exit if a dataframe lacks required columns
  #---------------------------------------------------------------
  def check_columns(self, df, columns, table):
    missing = [c for c in columns if c not in df.columns]
    if missing:
      sys.exit('ProcessIO::check_columns: table {} in {} is missing columns {}'.format(table, self.input_file, missing))

  def check_duplicates(self, df, identifier, table):
    n_duplicates = sum(df.duplicated(identifier))
    if n_duplicates > 0:
      sys.exit('ERROR: There appear to be {} duplicate entries in the {} dataframe'.format(n_duplicates, table))

  @staticmethod
  def group(df, identifier):
    if df is None or len(df.index) == 0:
      return {}
    if len(identifier) == 1:
      return {(key,): group for key, group in df.groupby(identifier[0], sort=False)}
    return {key: group for key, group in df.groupby(identifier, sort=False)}

  #---------------------------------------------------------------
  # Build detector-level EventRecords in event table order
  #---------------------------------------------------------------
  def build_events(self, event_df, jet_df, track_df, constituent_df=None, d0_df=None):

    self.check_columns(event_df, EVENT_COLUMNS, 'event')
    self.check_columns(jet_df, JET_COLUMNS, 'jet')
    self.check_columns(track_df, TRACK_COLUMNS, 'track')
    if constituent_df is not None:
      self.check_columns(constituent_df, CONSTITUENT_COLUMNS, 'jet constituent')
    if d0_df is not None:
      self.check_columns(d0_df, D0_COLUMNS, 'D0 candidate')
    self.check_duplicates(event_df, UNIQUE_IDENTIFIER, 'event')
    self.check_duplicates(track_df, UNIQUE_IDENTIFIER + ['track_index'], 'track')

    jets_per_event = self.group(jet_df, UNIQUE_IDENTIFIER)
    tracks_per_event = self.group(track_df, UNIQUE_IDENTIFIER)
    constituents_per_event = self.group(constituent_df, UNIQUE_IDENTIFIER)
    d0_per_event = self.group(d0_df, UNIQUE_IDENTIFIER)
    has_mc_id = 'mcCollisionId' in event_df.columns

    events = []
    for row in event_df.itertuples(index=False):
      if len(events) >= self.event_number_max:
        break
      collision = self.make_collision(row, has_mc_id)
      key = collision.key()

      tracks = self.make_tracks(tracks_per_event.get(key))
      jets = self.make_jets(jets_per_event.get(key), constituents_per_event.get(key),
                            {t.index(): t for t in tracks}, 'track_index', key)
      d0_candidates = self.make_d0_candidates(d0_per_event.get(key))
      events.append(event_info.EventRecord(collision, jets, tracks, d0_candidates))

    pinfo('built {} events'.format(len(events)))
    return events

  #---------------------------------------------------------------
  # Build particle-level McEventRecords in mc event table order
  #---------------------------------------------------------------
  def build_mc_events(self, mc_event_df, event_df, mc_jet_df, particle_df, mc_constituent_df=None):

    self.check_columns(mc_event_df, MC_EVENT_COLUMNS, 'mc event')
    self.check_columns(event_df, EVENT_COLUMNS + MC_IDENTIFIER, 'event')
    self.check_columns(mc_jet_df, MC_JET_COLUMNS, 'mc jet')
    self.check_columns(particle_df, PARTICLE_COLUMNS, 'particle')
    if mc_constituent_df is not None:
      self.check_columns(mc_constituent_df, MC_CONSTITUENT_COLUMNS, 'mc jet constituent')
    self.check_duplicates(mc_event_df, MC_IDENTIFIER, 'mc event')
    self.check_duplicates(particle_df, MC_IDENTIFIER + ['particle_index'], 'particle')

    collisions_per_mc_event = {}
    for row in event_df.itertuples(index=False):
      collision = self.make_collision(row, True)
      if collision.has_mc_collision():
        collisions_per_mc_event.setdefault((collision.mc_collision_id,), []).append(collision)

    jets_per_event = self.group(mc_jet_df, MC_IDENTIFIER)
    particles_per_event = self.group(particle_df, MC_IDENTIFIER)
    constituents_per_event = self.group(mc_constituent_df, MC_IDENTIFIER)

    mc_events = []
    for row in mc_event_df.itertuples(index=False):
      if len(mc_events) >= self.event_number_max:
        break
      mc_collision = event_info.McCollision(
        ev_id=row.mcCollisionId, pos_z=row.posZ, cent_ft0m=row.centFT0M,
        mult_ft0a=row.multFT0A, rho=row.rho, weight=row.weight)
      key = (mc_collision.ev_id,)

      particles = self.make_particles(particles_per_event.get(key))
      jets = self.make_jets(jets_per_event.get(key), constituents_per_event.get(key),
                            {p.index(): p for p in particles}, 'particle_index', key)
      mc_events.append(event_info.McEventRecord(mc_collision, collisions_per_mc_event.get(key, []), jets, particles))

    pinfo('built {} mc events'.format(len(mc_events)))
    return mc_events

  #---------------------------------------------------------------
  # Per-event object construction
  #---------------------------------------------------------------
  def make_collision(self, row, has_mc_id):
    return event_info.Collision(
      run_number=row.run_number, ev_id=row.ev_id, pos_z=row.posZ,
      cent_ft0c=row.centFT0C, cent_ft0a=row.centFT0A, cent_ft0m=row.centFT0M,
      mult_ft0m=row.multFT0M, mult_ntracks_global=row.multNTracksGlobal, occupancy=row.occupancy,
      rho=row.rho, weight=row.weight, event_sel=row.eventSel, is_mb_gap=row.isMBGap,
      mc_collision_id=row.mcCollisionId if has_mc_id else -1)

  def make_tracks(self, df):
    if df is None:
      return []
    return [event_info.Track(row.pt, row.eta, row.phi, index=row.track_index, track_sel=row.trackSel)
            for row in df.itertuples(index=False)]

  def make_particles(self, df):
    if df is None:
      return []
    return [event_info.Particle(row.pt, row.eta, row.phi, index=row.particle_index)
            for row in df.itertuples(index=False)]

  def make_d0_candidates(self, df):
    if df is None:
      return []
    return [event_info.D0Candidate(row.pt, row.eta, row.phi, row.m)
            for row in df.itertuples(index=False)]

  #---------------------------------------------------------------
  # Jets with constituents resolved against the event's tracks/particles
  #---------------------------------------------------------------
  def make_jets(self, jet_df, constituent_df, hadrons_by_index, index_column, key):
    if jet_df is None:
      return []

    constituent_indices = {}
    if constituent_df is not None:
      for jet_index, group in constituent_df.groupby('jet_index', sort=False):
        constituent_indices[jet_index] = list(group[index_column])

    has_weight = 'eventWeight' in jet_df.columns
    jets = []
    for row in jet_df.itertuples(index=False):
      constituents = []
      for i in constituent_indices.get(row.jet_index, []):
        if i not in hadrons_by_index:
          sys.exit('ProcessIO::make_jets: constituent {} of jet {} in event {} not found in {} table'.format(
            i, row.jet_index, key, index_column.split('_')[0]))
        constituents.append(hadrons_by_index[i])
      jets.append(event_info.Jet(row.pt, row.eta, row.phi, row.area, row.r, constituents=constituents,
                                 index=row.jet_index, event_weight=row.eventWeight if has_weight else 1.))
    return jets
