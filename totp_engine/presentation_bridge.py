# totp_engine/presentation_bridge.py
# Contrat minimal vers les actions de l'UI (copie, affichage des champs masqués)

from abc import ABC, abstractmethod


class PresentationBridge(ABC):
    @abstractmethod
    def on_copy(self, code: str) -> None:
        """Transmet le code courant au presse-papiers ; doit rendre la main tout de suite"""

    @abstractmethod
    def on_reveal(self, toggle: bool) -> None:
        """Masque/affiche les champs sensibles hors OTP (le code OTP n'est jamais masqué)"""
