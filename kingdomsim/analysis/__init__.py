from kingdomsim.analysis.strategy import StrategyEngine, enumerate_battlefield_subsets

__all__ = [
    "StrategyEngine",
    "enumerate_battlefield_subsets",
]
