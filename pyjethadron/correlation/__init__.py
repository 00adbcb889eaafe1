from .angles import PI_HALF, TWO_PI, wrap_delta_phi, sign_flip, is_back_to_back
from .leading_jet import LeadingPair, find_leading_pair
from .correlation_filler import LeadingJetHadronFiller, JetHadronFiller, D0JetFiller
