"""Connection property sets for ``.rdp`` files and ``rdp://`` URIs.

Field order in each ``declared_fields`` table is the order in which the
properties are written.  Inherited fields come first.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .protection import decode_password, encode_password
from .schema import FieldSpec, PropertySet, property_set
from .window_position import WindowPosition

_BINARY = frozenset({0, 1})


def _flag(name: str, key: str, label: str, allowed: Iterable[int] = _BINARY) -> FieldSpec:
    return FieldSpec(name, key, "integer", allowed=frozenset(allowed), label=label)


def _int(name: str, key: str, label: str, **options: Any) -> FieldSpec:
    return FieldSpec(name, key, "integer", label=label, **options)


def _text(name: str, key: str, label: str, **options: Any) -> FieldSpec:
    return FieldSpec(name, key, "text", label=label, **options)


def _split(raw: str | None, sep: str) -> list[str]:
    if not raw:
        return []
    return [p for p in raw.split(sep) if p]


def _join(items: Iterable[str] | None, sep: str) -> str | None:
    values = list(items or ())
    return sep.join(values) if values else None


##########################
##### SESSION (BASE) #####
##########################


class RemoteDesktopProperties(PropertySet):
    """Session behaviour, redirection and display properties."""

    declared_fields = (
        _flag("enable_rds_aad_auth", "enablerdsaadauth", "Microsoft Entra single sign-on"),
        _flag("enable_credssp_support", "enablecredsspsupport", "Credential Security Support Provider"),
        _text("alternate_shell", "alternate shell", "Alternate shell"),
        _flag("autoreconnection_enabled", "autoreconnection enabled", "Reconnection"),
        _flag("bandwidth_autodetect", "bandwidthautodetect", "Bandwidth auto detect"),
        _flag("network_autodetect", "networkautodetect", "Network auto detect"),
        _flag("compression", "compression", "Compression"),
        _flag("video_playback_mode", "videoplaybackmode", "Video playback"),
        _flag("audio_capture_mode", "audiocapturemode", "Microphone redirection"),
        _flag("encode_redirected_video_capture", "encode redirected video capture", "Redirect video encoding"),
        _flag(
            "redirected_video_capture_encoding_quality",
            "redirected video capture encoding quality",
            "Redirected video capture encoding quality",
            (0, 1, 2),
        ),
        _flag("audio_mode", "audiomode", "Audio output location", (0, 1, 2)),
        _text("cameras_to_redirect", "camerastoredirect", "Camera redirection"),
        _text("devices_to_redirect", "devicestoredirect", "MTP and PTP redirection"),
        _text("drives_to_redirect", "drivestoredirect", "Drive/storage redirection"),
        _flag("keyboard_hook", "keyboardhook", "Windows key combinations", (0, 1, 2, 3)),
        _flag("redirect_clipboard", "redirectclipboard", "Clipboard redirection"),
        _flag("redirect_com_ports", "redirectcomports", "COM ports redirection"),
        _flag("redirect_location", "redirectlocation", "Location service redirection"),
        _flag("redirect_printers", "redirectprinters", "Printer redirection"),
        _flag("redirect_smart_cards", "redirectsmartcards", "Smart card redirection"),
        _flag("redirect_webauthn", "redirectwebauthn", "WebAuthn redirection"),
        _text("usb_devices_to_redirect", "usbdevicestoredirect", "USB device redirection"),
        _flag("use_multimon", "use multimon", "Multiple displays"),
        _text("selected_monitors", "selectedmonitors", "Selected monitors"),
        _flag("maximize_to_current_displays", "maximizetocurrentdisplays", "Maximize to current displays"),
        _flag("single_mon_in_windowed_mode", "singlemoninwindowedmode", "Multi to single display switch"),
        _flag("screen_mode_id", "screen mode id", "Screen mode", (1, 2)),
        _flag("smart_sizing", "smart sizing", "Smart sizing"),
        _flag("dynamic_resolution", "dynamic resolution", "Dynamic resolution"),
        _flag("desktop_size_id", "desktop size id", "Desktop size", (0, 1, 2, 3, 4)),
        _int("desktop_height", "desktopheight", "Desktop height", minimum=200, maximum=8192),
        _int("desktop_width", "desktopwidth", "Desktop width", minimum=200, maximum=8192),
        _flag(
            "desktop_scale_factor",
            "desktopscalefactor",
            "Desktop scale factor",
            (100, 125, 150, 175, 200, 250, 300, 400, 500),
        ),
    )

    # ---- list helpers ----

    def get_cameras_to_redirect(self) -> list[str]:
        return _split(self["cameras_to_redirect"], ";")

    def set_cameras_to_redirect(self, items: Iterable[str] | None) -> None:
        self["cameras_to_redirect"] = _join(items, ";")

    def get_devices_to_redirect(self) -> list[str]:
        return _split(self["devices_to_redirect"], ";")

    def set_devices_to_redirect(self, items: Iterable[str] | None) -> None:
        self["devices_to_redirect"] = _join(items, ";")

    def get_drives_to_redirect(self) -> list[str]:
        return _split(self["drives_to_redirect"], ";")

    def set_drives_to_redirect(self, items: Iterable[str] | None) -> None:
        self["drives_to_redirect"] = _join(items, ";")

    def get_usb_devices_to_redirect(self) -> list[str]:
        return _split(self["usb_devices_to_redirect"], ";")

    def set_usb_devices_to_redirect(self, items: Iterable[str] | None) -> None:
        self["usb_devices_to_redirect"] = _join(items, ";")

    def get_selected_monitors(self) -> list[str]:
        return _split(self["selected_monitors"], ",")

    def set_selected_monitors(self, items: Iterable[str] | None) -> None:
        self["selected_monitors"] = _join(items, ",")

    # ---- wildcard shortcuts ----

    @property
    def redirect_all_devices(self) -> bool:
        return (self["devices_to_redirect"] or "").lower() == "*"

    @property
    def redirect_dynamic_devices(self) -> bool:
        return (self["devices_to_redirect"] or "").lower() == "dynamicdevices"

    @property
    def redirect_all_drives(self) -> bool:
        return (self["drives_to_redirect"] or "").lower() == "*"

    @property
    def redirect_dynamic_drives(self) -> bool:
        return (self["drives_to_redirect"] or "").lower() == "dynamicdrives"

    def set_redirect_all_devices(self) -> None:
        self["devices_to_redirect"] = "*"

    def set_redirect_dynamic_devices(self) -> None:
        self["devices_to_redirect"] = "DynamicDevices"

    def set_redirect_all_drives(self) -> None:
        self["drives_to_redirect"] = "*"

    def set_redirect_dynamic_drives(self) -> None:
        self["drives_to_redirect"] = "DynamicDrives"


###################
##### SERVICE #####
###################


@property_set
class RemoteDesktopServiceProperties(RemoteDesktopProperties):
    """Remote Desktop Services connection, gateway and RemoteApp properties."""

    declared_fields = (
        _text("full_address", "full address", "Address", primary=True),
        _text("alternate_full_address", "alternate full address", "Alternate full address"),
        _text("username", "username", "Username"),
        _text("domain", "domain", "Domain"),
        _text("gateway_hostname", "gatewayhostname", "RD Gateway hostname"),
        _flag("gateway_credentials_source", "gatewaycredentialssource", "RD Gateway authentication", range(6)),
        _flag("gateway_profile_usage_method", "gatewayprofileusagemethod", "RD Gateway profile"),
        _flag("gateway_usage_method", "gatewayusagemethod", "Use RD Gateway", range(5)),
        _flag("prompt_credential_once", "promptcredentialonce", "Save credentials"),
        _flag("authentication_level", "authentication level", "Server authentication", range(4)),
        _flag("disable_connection_sharing", "disableconnectionsharing", "Connection sharing"),
        _text("remote_application_cmdline", "remoteapplicationcmdline", "Command-line parameters"),
        _flag("remote_application_expand_cmdline", "remoteapplicationexpandcmdline", "Command-line variables"),
        _flag(
            "remote_application_expand_working_dir",
            "remoteapplicationexpandworkingdir",
            "Working directory variables",
        ),
        _text("remote_application_file", "remoteapplicationfile", "Open file"),
        _text("remote_application_icon", "remoteapplicationicon", "Icon file"),
        _flag("remote_application_mode", "remoteapplicationmode", "Application mode"),
        _text("remote_application_name", "remoteapplicationname", "Application display name"),
        _text("remote_application_program", "remoteapplicationprogram", "Alias/executable name"),
    )


@property_set
class AzureVirtualDesktopProperties(RemoteDesktopProperties):
    """Azure Virtual Desktop specific properties."""

    declared_fields = (
        _flag("target_is_aad_joined", "targetisaadjoined", "Connect to Microsoft Entra joined host"),
        _text("kdc_proxy_name", "kdcproxyname", "KDC proxy name"),
    )


##################
##### CLIENT #####
##################


@property_set
class RemoteDesktopClientProperties(RemoteDesktopServiceProperties):
    """Properties understood by the Remote Desktop client."""

    declared_fields = (
        _flag("administrative_session", "administrative session", "Administrative session"),
        _flag("allow_desktop_composition", "allow desktop composition", "Allow desktop composition"),
        _flag("allow_font_smoothing", "allow font smoothing", "Allow font smoothing"),
        _flag("audio_quality_mode", "audioqualitymode", "Audio quality mode", (0, 1, 2)),
        _int("autoreconnect_max_retries", "autoreconnect max retries", "Auto reconnect max retries", minimum=0),
        _flag("bitmap_cache_persist_enable", "bitmapcachepersistenable", "Bitmap cache persist enabled"),
        _flag("connection_type", "connection type", "Connection type", range(1, 8)),
        _flag("disable_ctrl_alt_del", "disable ctrl+alt+del", "Disable Ctrl + Alt + Delete"),
        _flag("disable_printer_redirection", "disableprinterredirection", "Disable printer redirection"),
        _flag("disable_clipboard_redirection", "disableclipboardredirection", "Disable clipboard redirection"),
        _flag("disable_cursor_setting", "disable cursor setting", "Disable cursor settings"),
        _flag("disable_wallpaper", "disable wallpaper", "Disable wallpaper"),
        _flag("disable_full_window_drag", "disable full window drag", "Disable full window drag"),
        _flag("disable_menu_anims", "disable menu anims", "Disable menu animation effects"),
        _flag("disable_themes", "disable themes", "Disable themes"),
        _flag("display_connection_bar", "displayconnectionbar", "Display connection bar"),
        _flag("enable_workspace_reconnect", "enableworkspacereconnect", "Enable workspace reconnect"),
        _int("gateway_brokering_type", "gatewaybrokeringtype", "Gateway brokering type"),
        _text("kdc_proxy_name", "kdcproxyname", "KDC proxy name"),
        _text("load_balance_info", "loadbalanceinfo", "Load balance info"),
        _flag("negotiate_security_layer", "negotiate security layer", "Negotiate security layer"),
        _flag("pin_connection_bar", "pinconnectionbar", "Pin connection bar"),
        _flag("prompt_for_credentials", "prompt for credentials", "Prompt for credentials"),
        _flag("rdg_is_kdc_proxy", "rdgiskdcproxy", "RDG is KDC proxy"),
        _flag("redirect_drives", "redirectdrives", "Redirect drives"),
        _flag("redirect_pos_devices", "redirectposdevices", "Redirect POS devices"),
        _int("server_port", "server port", "Server port", minimum=0, maximum=65535),
        _flag("session_bpp", "session bpp", "Session colour depth", (8, 15, 16, 24, 32)),
        _text("shell_working_directory", "shell working directory", "Shell working directory"),
        _flag("span_monitors", "span monitors", "Span monitors"),
        _flag("use_redirection_server_name", "use redirection server name", "Use redirection server name"),
        _text("winposstr", "winposstr", "Window position"),
        _text("workspace_id", "workspaceid", "Workspace id"),
    )

    @property
    def window_position(self) -> WindowPosition | None:
        raw = self["winposstr"]
        return None if raw is None else WindowPosition.parse(raw)

    @window_position.setter
    def window_position(self, value: WindowPosition | None) -> None:
        self["winposstr"] = None if value is None else str(value)


@property_set
class TerminalServicesClientProperties(RemoteDesktopClientProperties):
    """Client properties including the saved ``password 51`` secret.

    ``password`` holds the UTF-16 LE password bytes; pass a protector to the
    serializer to keep them out of the written file in clear text.
    """

    declared_fields = (
        FieldSpec(
            "password",
            "password 51",
            "bytes",
            protected=True,
            label="Password",
        ),
    )

    def set_password(self, raw: str | None) -> None:
        self["password"] = None if raw is None else encode_password(raw)

    def get_password(self) -> str | None:
        data = self["password"]
        return None if data is None else decode_password(data)


###############
##### URI #####
###############


@property_set
class RemoteDesktopUriProperties(PropertySet):
    """Properties accepted in an ``rdp://`` URI.

    ``full address`` is the primary field and always leads the URI.
    """

    declared_fields = (
        _flag("allow_desktop_composition", "allow desktop composition", "Allow desktop composition"),
        _flag("allow_font_smoothing", "allow font smoothing", "Allow font smoothing"),
        _text("alternate_shell", "alternate shell", "Alternate shell"),
        _flag("audio_mode", "audiomode", "Audio output location", (0, 1, 2)),
        _flag("authentication_level", "authentication level", "Server authentication", range(4)),
        _flag("connect_to_console", "connect to console", "Connect to console"),
        _flag("disable_cursor_setting", "disable cursor setting", "Disable cursor settings"),
        _flag("disable_full_window_drag", "disable full window drag", "Disable full window drag"),
        _flag("disable_menu_anims", "disable menu anims", "Disable menu animation effects"),
        _flag("disable_themes", "disable themes", "Disable themes"),
        _flag("disable_wallpaper", "disable wallpaper", "Disable wallpaper"),
        _text("drives_to_redirect", "drivestoredirect", "Drive/storage redirection"),
        _int("desktop_height", "desktopheight", "Desktop height", minimum=200, maximum=8192),
        _int("desktop_width", "desktopwidth", "Desktop width", minimum=200, maximum=8192),
        _text("domain", "domain", "Domain"),
        _text("full_address", "full address", "Address", primary=True),
        _text("gateway_hostname", "gatewayhostname", "RD Gateway hostname"),
        _flag("gateway_usage_method", "gatewayusagemethod", "Use RD Gateway", range(5)),
        _flag(
            "prompt_for_credentials_on_client",
            "prompt for credentials on client",
            "Prompt for credentials on client",
        ),
        _text("load_balance_info", "loadbalanceinfo", "Load balance info"),
        _flag("redirect_printers", "redirectprinters", "Printer redirection"),
        _text("remote_application_cmdline", "remoteapplicationcmdline", "Command-line parameters"),
        _flag("remote_application_mode", "remoteapplicationmode", "Application mode"),
        _text("shell_working_directory", "shell working directory", "Shell working directory"),
        _flag("use_redirection_server_name", "Use redirection server name", "Use redirection server name"),
        _text("username", "username", "Username"),
        _flag("screen_mode_id", "screen mode id", "Screen mode", (1, 2)),
        _flag("session_bpp", "session bpp", "Session colour depth", (8, 15, 16, 24, 32)),
        _flag("use_multimon", "use multimon", "Multiple displays"),
    )


PROFILES: dict[str, type[PropertySet]] = {
    "service": RemoteDesktopServiceProperties,
    "avd": AzureVirtualDesktopProperties,
    "client": RemoteDesktopClientProperties,
    "mstsc": TerminalServicesClientProperties,
    "uri": RemoteDesktopUriProperties,
}

DEFAULT_PROFILE = "client"


__all__ = [
    "RemoteDesktopProperties",
    "RemoteDesktopServiceProperties",
    "AzureVirtualDesktopProperties",
    "RemoteDesktopClientProperties",
    "TerminalServicesClientProperties",
    "RemoteDesktopUriProperties",
    "PROFILES",
    "DEFAULT_PROFILE",
]
