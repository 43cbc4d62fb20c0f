from .sweep_expired_sessions_use_case import SweepExpiredSessionsUseCase, SweepResponse

__all__ = ["SweepExpiredSessionsUseCase", "SweepResponse"]
