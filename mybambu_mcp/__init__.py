"""
MyBambu MCP tool server: exchange rates, supported corridors and
international money transfers for chat agents.
"""

__version__ = "1.0.0"
