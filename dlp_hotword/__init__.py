"""Offline hotword proximity rules for sensitive-data findings.

Candidate matches from a detector are re-scored by nearby hotwords: a
hotword found inside a rule's proximity window either fixes the finding's
likelihood or moves it a number of steps along the likelihood scale.
"""
