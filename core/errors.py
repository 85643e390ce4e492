"""
core/errors.py
Error taxonomy for the pricing and consensus engine.
"""


class EngineError(Exception):
    """Base class for every error the engine raises."""


class InvalidOutcome(EngineError, ValueError):
    """An outcome outside the binary YES/NO domain."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Outcome must be 'yes' or 'no', got {value!r}")


class InvalidLiquidity(EngineError, ValueError):
    """A liquidity parameter that is not a positive finite number."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Liquidity must be a positive finite number, got {value!r}")


class UnresolvedAgentReference(EngineError, LookupError):
    """A bet references an agent the caller supplied no profile for."""

    def __init__(self, agent_id: object):
        self.agent_id = agent_id
        super().__init__(f"No agent profile for agent_id={agent_id!r}")
