from typing import List, Optional, Tuple, Any
import logging
import os
import pathlib
import tempfile

logger = logging.getLogger(__name__)


# python-escpos resolves a temp directory at import time; some minimal
# systems (printer kiosks, containers) have no /tmp.
def _ensure_temp_directory() -> None:
    try:
        _ = tempfile.gettempdir()
        return
    except Exception:
        pass

    for var_name in ("TMPDIR", "TEMP", "TMP"):
        val = os.getenv(var_name)
        if isinstance(val, str) and val.strip():
            try:
                path = pathlib.Path(val.strip())
                path.mkdir(parents=True, exist_ok=True)
                os.environ[var_name] = str(path)
                tempfile.tempdir = None
                _ = tempfile.gettempdir()
                return
            except Exception:
                continue

    fallback = pathlib.Path(os.path.expanduser("~/.cache/labelwrap/tmp"))
    try:
        fallback.mkdir(parents=True, exist_ok=True)
        os.environ["TMPDIR"] = str(fallback)
        tempfile.tempdir = None
    except OSError as exc:
        logger.debug(f"Could not create fallback temp dir {fallback}: {exc}")

_ensure_temp_directory()

try:
    from escpos.printer import Usb
    try:
        # Windows-only raw printing via the spooler (no libusb needed)
        from escpos.printer import Win32Raw  # type: ignore
    except Exception:
        Win32Raw = None  # type: ignore
except Exception as import_error:  # pragma: no cover
    raise SystemExit(
        "python-escpos is required. Install with 'pip install python-escpos pyusb'\n"
        f"Import error: {import_error}"
    )

try:
    import usb.core  # type: ignore
    import usb.util  # type: ignore
except Exception as import_error:  # pragma: no cover
    raise SystemExit(
        "pyusb is required for USB auto-discovery. Install with 'pip install pyusb'\n"
        f"Import error: {import_error}"
    )


# Optional explicit capability profile; None uses the library default
PRINTER_PROFILE: Optional[str] = None

USB_PRINTER_CLASS = 7


def _prompt_input(prompt: str) -> str:
    try:
        return input(prompt)
    except EOFError:
        return ""


def _get_string_safely(device, index: int) -> str:
    if not index:
        return ""
    try:
        return usb.util.get_string(device, index) or ""
    except Exception:
        return ""


def _is_printer_device(device) -> bool:
    if getattr(device, "bDeviceClass", None) == USB_PRINTER_CLASS:
        return True
    try:
        for cfg in device:
            for intf in cfg:
                if intf.bInterfaceClass == USB_PRINTER_CLASS:
                    return True
    except Exception:
        pass
    return False


def discover_usb_printers() -> List[Tuple[int, int, str, str]]:
    """Return (vid, pid, manufacturer, product) for every attached USB printer."""
    devices = []
    try:
        for dev in usb.core.find(find_all=True):  # type: ignore[attr-defined]
            if _is_printer_device(dev):
                manufacturer = _get_string_safely(dev, getattr(dev, "iManufacturer", 0))
                product = _get_string_safely(dev, getattr(dev, "iProduct", 0))
                devices.append((int(dev.idVendor), int(dev.idProduct), manufacturer, product))
    except Exception as exc:
        logger.debug(f"USB discovery failed: {exc}")
        return []
    return devices


def discover_windows_printers() -> List[str]:
    try:
        import win32print  # type: ignore
    except Exception:
        return []

    flags = (
        getattr(win32print, "PRINTER_ENUM_LOCAL", 2)
        | getattr(win32print, "PRINTER_ENUM_CONNECTIONS", 4)
    )
    try:
        printers = win32print.EnumPrinters(flags)
    except Exception:
        return []

    names: List[str] = []
    for entry in printers:
        if isinstance(entry, (list, tuple)) and len(entry) >= 3 and isinstance(entry[2], str):
            if entry[2] not in names:
                names.append(entry[2])
    return names


def _prompt_select(labels: List[str]) -> Optional[int]:
    for idx, label in enumerate(labels, start=1):
        print(f"  {idx}. {label}")
    while True:
        sel = _prompt_input("Select a printer by number (or press Enter to cancel): ").strip()
        if not sel:
            return None
        if sel.isdigit() and 1 <= int(sel) <= len(labels):
            return int(sel) - 1
        print("Invalid selection. Please try again.")


def select_printer_target() -> Tuple[str, Any]:
    """Prompt once and return a reusable printer target descriptor.

    Returns ('win32', printer_name) or ('usb', (vid, pid)).
    """
    if os.name == 'nt':
        names = discover_windows_printers()
        if len(names) == 1:
            print(f"Using Windows printer: {names[0]}")
            return ('win32', names[0])
        if names:
            print("Select a Windows printer:")
            idx = _prompt_select(names)
            if idx is not None:
                return ('win32', names[idx])
        print("Windows spooler not selected; attempting direct USB access (libusb required).")

    candidates = discover_usb_printers()
    if not candidates:
        raise SystemExit("No suitable printer selected or found.")
    labels = [
        f"{manufacturer or 'Unknown'} - {product or 'Unknown'} (VID=0x{vid:04x}, PID=0x{pid:04x})"
        for vid, pid, manufacturer, product in candidates
    ]
    if len(candidates) == 1:
        print(f"Discovered printer: {labels[0]}")
        idx = 0
    else:
        print("Multiple USB printers detected:")
        idx = _prompt_select(labels)
        if idx is None:
            raise SystemExit("No suitable printer selected or found.")
    vid, pid, *_ = candidates[idx]
    return ('usb', (vid, pid))


def _parse_usb_id(value: str) -> Optional[int]:
    v = value.strip().lower()
    try:
        if v.startswith('0x'):
            return int(v, 16)
        return int(v)
    except ValueError:
        return None


def _select_printer_target_from_env() -> Optional[Tuple[str, Any]]:
    """Select printer target based on environment variables.

    - LABELWRAP_PRINTER_KIND: 'win32' or 'usb'
      - 'win32': LABELWRAP_PRINTER_NAME
      - 'usb': LABELWRAP_USB_VID and LABELWRAP_USB_PID (hex like 0x0416 or decimal)
    """
    kind = (os.getenv('LABELWRAP_PRINTER_KIND') or '').strip().lower()
    if kind == 'win32':
        name = os.getenv('LABELWRAP_PRINTER_NAME')
        return ('win32', name) if name else None
    if kind == 'usb':
        vid = _parse_usb_id(os.getenv('LABELWRAP_USB_VID') or '')
        pid = _parse_usb_id(os.getenv('LABELWRAP_USB_PID') or '')
        if isinstance(vid, int) and isinstance(pid, int):
            return ('usb', (vid, pid))
        logger.warning("LABELWRAP_PRINTER_KIND=usb needs LABELWRAP_USB_VID and LABELWRAP_USB_PID")
        return None
    if kind:
        logger.warning(f"Unknown LABELWRAP_PRINTER_KIND: {kind!r}")
    return None


def select_printer_target_noninteractive() -> Tuple[str, Any]:
    """Select a printer target without prompting.

    Order of precedence:
    1) Environment variables (LABELWRAP_PRINTER_KIND, ...)
    2) Windows printers (first available) if on Windows
    3) USB printers (first available)
    """
    env_target = _select_printer_target_from_env()
    if env_target is not None:
        return env_target

    if os.name == 'nt':
        names = discover_windows_printers()
        if names:
            return ('win32', names[0])

    candidates = discover_usb_printers()
    if candidates:
        vid, pid, *_ = candidates[0]
        return ('usb', (vid, pid))
    raise SystemExit(
        "No suitable printer found. Set LABELWRAP_PRINTER_* env vars, connect a printer, "
        "or use --preview."
    )


def _open_usb_printer_with_fallbacks(vid: int, pid: int) -> Any:
    """Open a USB ESC/POS printer, retrying with kernel driver detach and the
    endpoints read from the device descriptors.

    Each handle is validated with ESC @ before it is returned.
    """
    errors: List[str] = []

    def _attempt_open_and_validate(**kwargs: Any) -> Any:
        inst = Usb(vid, pid, **kwargs)
        try:
            inst._raw(b"\x1b@")
        except Exception:
            try:
                inst.close()
            except Exception:
                pass
            raise
        return inst

    attempts: List[Tuple[str, dict]] = [
        ("default", {}),
        ("detach_kernel_driver", {"usb_args": {"detach_kernel_driver": True}}),
    ]

    try:
        dev = usb.core.find(idVendor=vid, idProduct=pid)  # type: ignore[attr-defined]
    except Exception as exc:
        dev = None
        errors.append(f"usb.find: {exc}")

    if dev is not None:
        try:
            for cfg in dev:  # type: ignore[assignment]
                cfg_val = getattr(cfg, "bConfigurationValue", None) or 1
                for intf in cfg:
                    out_ep = None
                    in_ep = None
                    for ep in intf:
                        addr = getattr(ep, "bEndpointAddress", None)
                        if addr is None:
                            continue
                        if usb.util.endpoint_direction(addr) == usb.util.ENDPOINT_OUT:  # type: ignore[attr-defined]
                            out_ep = addr
                        else:
                            in_ep = addr
                    if out_ep is None:
                        continue
                    intf_num = getattr(intf, "bInterfaceNumber", 0)
                    attempts.append((
                        f"iface {intf_num} cfg {cfg_val} out 0x{out_ep:02x} in 0x{(in_ep or 0):02x}",
                        {
                            "interface": intf_num,
                            "out_ep": out_ep,
                            "in_ep": in_ep,
                            "usb_args": {"detach_kernel_driver": True, "bConfigurationValue": cfg_val},
                        },
                    ))
        except Exception as exc:
            errors.append(f"cfg-scan: {exc}")

    for label, kwargs in attempts:
        try:
            return _attempt_open_and_validate(profile=PRINTER_PROFILE, **kwargs)
        except Exception as exc:
            logger.debug(f"USB open attempt '{label}' failed: {exc}")
            errors.append(f"{label}: {exc}")

    hint = (
        "Failed to open USB printer. On Linux, ensure permissions (udev rule) and that the 'usblp' "
        "kernel driver is not bound to the device, e.g.:\n"
        "SUBSYSTEM==\"usb\", ATTR{idVendor}==\"%04x\", ATTR{idProduct}==\"%04x\", MODE=\"0666\""
    ) % (vid, pid)
    raise SystemExit(f"{hint}\nLast errors: {'; '.join(errors[-5:])}")


def open_printer_from_target(target: Tuple[str, Any]) -> Any:
    kind, data = target
    if kind == 'win32':
        if Win32Raw is None:
            raise SystemExit("Win32Raw backend not available; install python-escpos with Windows support.")
        return Win32Raw(printer_name=data)
    if kind == 'usb':
        vid, pid = data
        return _open_usb_printer_with_fallbacks(vid, pid)
    raise SystemExit(f"Unknown printer target kind: {kind}")


def close_printer(printer_instance: Any) -> None:
    try:
        close_fn = getattr(printer_instance, "close", None)
        if callable(close_fn):
            close_fn()
    except Exception as exc:
        logger.debug(f"Error closing printer: {exc}")


def _get_columns_from_profile(profile: Any, font: str) -> Optional[int]:
    if profile is None:
        return None
    try:
        cols = profile.get_columns(font)
        if isinstance(cols, int) and cols > 0:
            return cols
    except Exception:
        pass

    data = getattr(profile, "profile_data", None)
    if isinstance(data, dict):
        fonts = data.get("fonts")
        if isinstance(fonts, dict):
            entry = fonts.get("1" if font == "b" else "0") or {}
            cols = entry.get("columns") if isinstance(entry, dict) else None
            if isinstance(cols, int) and cols > 0:
                return cols
    return None


def get_printer_columns(printer_instance: Any, font: str = "a", default: int = 42) -> int:
    """Columns of ``font`` according to the printer's capability profile."""
    cols = _get_columns_from_profile(getattr(printer_instance, "profile", None), font)
    if isinstance(cols, int) and cols > 0:
        return cols
    return default


def _reset_text_style(printer_instance: Any) -> None:
    printer_instance.set(align='left', font='a', bold=False, underline=0, normal_textsize=True)


def _try_smooth(printer_instance: Any, enabled: bool = True) -> None:
    """Best-effort smoothing; not every profile/printer supports it."""
    try:
        printer_instance.set(smooth=enabled)
    except Exception:
        pass
