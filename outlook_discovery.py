"""OutlookDiscovery — finds the PST files attached to the current user's Outlook.

Inherits from DiscoverySource.  Windows only: profiles are looked up in the
per-user registry and stores are enumerated through the Outlook COM object
model, without showing any UI.

REQUIREMENTS
------------
    pip install pywin32
"""

import logging

from base_discovery import Discovery, DiscoverySource, DiscoverySourceError, select_pst_paths

logger = logging.getLogger(__name__)

# Newest first; 16.0 covers Outlook 2016, 2019, 2021 and Microsoft 365
OUTLOOK_VERSIONS = ("16.0", "15.0", "14.0", "12.0", "11.0")
PROFILES_KEY = r"Software\Microsoft\Office\{version}\Outlook\Profiles"


def outlook_profile_exists(versions=OUTLOOK_VERSIONS) -> bool:
    """True if any known Outlook version has at least one mail profile for this user."""
    import winreg

    for version in versions:
        key_path = PROFILES_KEY.format(version=version)
        try:
            with winreg.OpenKey(winreg.HKEY_CURRENT_USER, key_path) as key:
                subkey_count, _, _ = winreg.QueryInfoKey(key)
        except FileNotFoundError:
            continue
        if subkey_count > 0:
            logger.debug("Outlook %s has %d profile(s)", version, subkey_count)
            return True
    return False


class OutlookDiscovery(DiscoverySource):
    """Collect store file paths from the default Outlook profile."""

    def __init__(self, profile_name: str = "") -> None:
        super().__init__()
        self.profile_name = profile_name

    # ------------------------------------------------------------------
    # COM session
    # ------------------------------------------------------------------

    def _logon(self):
        """Create the Outlook application and log on to MAPI without UI."""
        try:
            import win32com.client

            app = win32com.client.Dispatch("Outlook.Application")
        except Exception as exc:
            raise DiscoverySourceError(
                f"Failed to create Outlook COM object: {exc}"
            ) from exc

        try:
            namespace = app.GetNamespace("MAPI")
            namespace.Logon(self.profile_name, "", False, False)
        except Exception as exc:
            raise DiscoverySourceError(
                f"Failed to get MAPI namespace: {exc}"
            ) from exc

        return app, namespace

    def _store_paths(self) -> list[str]:
        app, namespace = self._logon()
        try:
            paths = []
            for store in namespace.Stores:
                paths.append(getattr(store, "FilePath", "") or "")
            self.logger.debug("Outlook reported %d store(s)", len(paths))
            return paths
        finally:
            namespace.Logoff()
            del namespace, app

    # ------------------------------------------------------------------
    # DiscoverySource interface
    # ------------------------------------------------------------------

    def discover(self, user: str) -> Discovery:
        if not outlook_profile_exists():
            self.logger.info("No Outlook profile for %s", user)
            return Discovery.no_profile()

        pst_paths = select_pst_paths(self._store_paths())
        if not pst_paths:
            self.logger.info("Outlook profile for %s has no PST files", user)
            return Discovery.no_pst_files()

        self.logger.info("Found %d PST file(s) for %s", len(pst_paths), user)
        return Discovery.found(pst_paths)
