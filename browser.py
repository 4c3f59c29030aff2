"""
browser.py — Browser capabilities reached through a JS component
------------------------------------------------------------------

Geolocation, the share sheet and the clipboard only exist in the user's
browser. Each request here renders a zero-height `streamlit_js_eval`
component that evaluates a promise and hands its result back on the next
rerun. Until then the call returns None.

Replies are plain dicts:

* position: {"coords": {latitude, longitude, accuracy}} or {"error": {code, message}}
* share:    {"method": "share" | "clipboard", "outcome": "ok" | "cancelled" | "failed", "message": str}
"""

import json

from streamlit_js_eval import streamlit_js_eval

from errors import ShareCancelled, SiteScanError
from settings import LOCATION_TIMEOUT

_POSITION_JS = """
new Promise((resolve) => {
  if (!navigator.geolocation) {
    resolve({error: {code: 0, message: "navigator.geolocation is not available"}});
    return;
  }
  const timer = setTimeout(() => resolve({error: {code: 3, message: "No position within %(ms)d ms"}}), %(ms)d);
  navigator.geolocation.getCurrentPosition(
    (p) => { clearTimeout(timer); resolve({coords: {latitude: p.coords.latitude, longitude: p.coords.longitude, accuracy: p.coords.accuracy}}); },
    (e) => { clearTimeout(timer); resolve({error: {code: e.code, message: e.message}}); },
    {enableHighAccuracy: true, timeout: %(ms)d, maximumAge: 0}
  );
})
"""

_SHARE_JS = """
(async () => {
  const data = %(payload)s;
  if (navigator.share) {
    try { await navigator.share(data); return {method: "share", outcome: "ok", message: ""}; }
    catch (e) { return {method: "share", outcome: e.name === "AbortError" ? "cancelled" : "failed", message: String(e)}; }
  }
  try { await navigator.clipboard.writeText(data.url); return {method: "clipboard", outcome: "ok", message: ""}; }
  catch (e) { return {method: "clipboard", outcome: "failed", message: String(e)}; }
})()
"""


class BrowserActionFailed(SiteScanError):
    pass


def request_position(key, timeout=LOCATION_TIMEOUT):
    """One high-accuracy fix, bounded by `timeout` seconds on the browser side."""
    return streamlit_js_eval(js_expressions=_POSITION_JS % {"ms": int(timeout * 1000)}, key=key)


def request_share(payload, key):
    """Open the share sheet, or copy payload['url'] when the browser has none."""
    return streamlit_js_eval(js_expressions=_SHARE_JS % {"payload": json.dumps(payload)}, key=key)


class ShareReply:
    """
    Replays a finished share reply as the `share` / `copy_to_clipboard`
    callables catalog.share_artifact expects.
    """

    def __init__(self, reply):
        if not isinstance(reply, dict):
            reply = {"outcome": "failed", "message": str(reply)}
        self.method = reply.get("method")
        self.outcome = reply.get("outcome")
        self.message = reply.get("message") or ""

    @property
    def share(self):
        return self._share if self.method == "share" else None

    def _share(self, payload):
        if self.outcome == "cancelled":
            raise ShareCancelled(self.message)
        if self.outcome != "ok":
            raise BrowserActionFailed(self.message or "share failed")

    def copy_to_clipboard(self, url):
        if self.outcome != "ok":
            raise BrowserActionFailed(self.message or "clipboard write failed")
