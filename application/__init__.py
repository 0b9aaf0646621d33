"""
Application Layer for the Streak Progress API.

This package contains:
- ports/: Abstract interfaces for the session store and the companion-device
  collaborators (sensor source, message channel, notification scheduler)
"""
