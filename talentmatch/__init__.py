"""
TalentMatch - candidate/job matching and application lifecycle engine.
"""

__app_name__ = "TalentMatch"
__version__ = "0.1.0"
