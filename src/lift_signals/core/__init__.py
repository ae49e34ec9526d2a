"""
Pure analytics engine.

Every function takes the workout history (and, for substitution, the
exercise catalog) as arguments and returns derived records.  Nothing in
this package reads the clock implicitly except through ``today``/``now``
defaults, and nothing here touches the history file.
"""
