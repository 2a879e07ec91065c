"""
Automation domain

Rules subscribe to a trigger and run one action. Emission sites in the other
domains call the functions in triggers.py; the dispatcher loads matching rules
and hands each to its action executor.
"""
