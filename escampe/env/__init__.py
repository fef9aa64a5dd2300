from .gym_env import EscampeEnv

__all__ = ["EscampeEnv"]
