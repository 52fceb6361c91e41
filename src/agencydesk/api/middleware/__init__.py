"""API middleware package.

Request ids, timing, rate limiting and the catch-all error handler live
here so the routers deal only with their own function.
"""
