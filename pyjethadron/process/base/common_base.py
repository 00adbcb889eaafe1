#!/usr/bin/env python3

"""
  Base class for the jet-hadron process classes: stores keyword arguments
  as members and prints them.
"""

################################################################
class CommonBase(object):

  #---------------------------------------------------------------
  # Constructor
  #---------------------------------------------------------------
  def __init__(self, **kwargs):
    for key, value in kwargs.items():
      setattr(self, key, value)

  #---------------------------------------------------------------
  # Print the members of the class
  #---------------------------------------------------------------
  def __str__(self):
    s = []
    variables = self.__dict__.keys()
    for v in variables:
      s.append('{} = {}'.format(v, self.__dict__[v]))
    return "[i] {} with \n .  {}".format(self.__class__.__name__, '\n .  '.join(s))
