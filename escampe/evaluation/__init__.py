from .match import EvaluationResult, Policy, RandomPolicy, evaluate_policies, sample_action

__all__ = ["EvaluationResult", "Policy", "RandomPolicy", "evaluate_policies", "sample_action"]
