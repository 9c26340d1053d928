"""
Test suite for the stand-up session engine.

Focus areas:
- Roster invariants and unbiased shuffle
- Timer recovery after the UI was closed
- Picker fairness and reel shape
- Coordinator celebration and scheduling
- Storage degradation
"""
