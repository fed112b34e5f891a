# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool server.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between MCP and core/:
#     1. Declares each tool's name, description, input and output contract
#     2. Builds the matching core/ operation
#     3. Runs it through core/runner.execute_tool() and converts the
#        envelope into a FastMCP ToolResult
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT round, strip or fall back (that's core/)
#   - They do NOT talk HTTP directly (that's core/public_api.py)
# =============================================================================
