"""
API route handlers grouped by area: health, generic flows, assessment
uploads, profile and the profile-driven career views.
"""
