"""Invitation-gated photo and video sharing into Immich albums."""
