"""Onboarding answers, per-step validation and the wizard state machine.

Import the wizard from fitcoach.onboarding.wizard; it depends on the coach
matcher, which in turn imports the answer schemas from this package.
"""
