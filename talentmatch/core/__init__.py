"""
Core business logic modules for TalentMatch.

Submodules:
- matching: Weighted candidate-job match scorer
- lifecycle: Application status state machine and audit trail
- stats: Read-model statistics over applications
- exceptions: Caller-visible error taxonomy
"""
