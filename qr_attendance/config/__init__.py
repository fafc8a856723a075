from qr_attendance.config.settings import settings

__all__ = ["settings"]
