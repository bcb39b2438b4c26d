"""
AchieveTrack Hub

Student achievement registry core: verification lifecycle, permission
policy and the chatbot query engine. Storage is provided by `achievetrack.store`.
"""

__version__ = "0.1.0"
