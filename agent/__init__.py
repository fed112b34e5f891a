# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent configuration.
#
# ARCHITECTURAL ROLE:
#   The agent is a client of the pricing tools.  It decides WHICH tool to
#   call and WHEN, and explains the results to the user.  It contains no
#   pricing logic (core/) and no tool code (tools/).
# =============================================================================
