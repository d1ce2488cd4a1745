# totp_ui/ressources.py
from pathlib import Path
import sys


def resource_path(*parts: str) -> Path:
    """Chemin d'une ressource, compatible PyInstaller"""
    # PyInstaller (sys._MEIPASS)
    if hasattr(sys, "_MEIPASS"):
        return Path(sys._MEIPASS).joinpath(*parts)

    # Mode exécutable : à côté de l'exe
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent.joinpath(*parts)

    # Mode développement
    return Path(__file__).parent.joinpath(*parts)


def load_stylesheet(name="style.qss") -> str:
    qss_path = resource_path(name)
    if not qss_path.exists():
        return ""
    return qss_path.read_text(encoding="utf-8")
