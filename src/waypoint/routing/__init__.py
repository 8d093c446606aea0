"""Routing — ordered per-method route lists with URL-pattern matching.

Routes are searched in registration order; the first matching
pattern handles the request.
"""
