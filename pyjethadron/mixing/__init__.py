from .event_binner import EventBinner, UNBINNED
from .mixing_cache import MixingCache
from .pair_generator import MixedPair, PairGenerator
