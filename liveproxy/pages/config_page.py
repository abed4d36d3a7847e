"""
Configuration Page

Landing page shown when a request carries no target URL. It turns a stream
address into a proxied URL in the browser; nothing is sent to the server.
"""

import html
import json
from string import Template

_PAGE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Live Stream Proxy</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
      background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
      min-height: 100vh;
      display: flex;
      align-items: center;
      justify-content: center;
      padding: 20px;
    }
    .container {
      background: rgba(255, 255, 255, 0.95);
      border-radius: 20px;
      box-shadow: 0 20px 40px rgba(0, 0, 0, 0.1);
      padding: 40px;
      max-width: 600px;
      width: 100%;
    }
    h1 { color: #333; text-align: center; margin-bottom: 10px; font-size: 2rem; }
    .subtitle { color: #666; text-align: center; margin-bottom: 30px; }
    .form-group { margin-bottom: 25px; }
    label { display: block; margin-bottom: 8px; color: #555; font-weight: 600; }
    input[type="text"] {
      width: 100%;
      padding: 15px;
      border: 2px solid #e1e5e9;
      border-radius: 12px;
      font-size: 16px;
      transition: border-color 0.3s ease;
    }
    input[type="text"]:focus { outline: none; border-color: #667eea; }
    .btn {
      width: 100%;
      padding: 15px;
      margin-top: 15px;
      background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
      color: white;
      border: none;
      border-radius: 12px;
      font-size: 16px;
      font-weight: 600;
      cursor: pointer;
    }
    .result {
      margin-top: 20px;
      padding: 20px;
      background: #e8f5e8;
      border-radius: 12px;
      border: 1px solid #4caf50;
    }
    .result h3 { color: #2e7d32; margin-bottom: 15px; }
    .result .url {
      background: white;
      padding: 10px;
      border-radius: 6px;
      word-break: break-all;
      font-family: monospace;
      border: 1px solid #ddd;
      margin-bottom: 10px;
    }
    .examples { background: #f8f9fa; border-radius: 12px; padding: 20px; margin-top: 25px; }
    .examples h3 { color: #333; margin-bottom: 10px; }
    .examples li { color: #555; margin: 6px 0 6px 20px; font-family: monospace; word-break: break-all; }
    .footer { text-align: center; margin-top: 30px; color: #888; font-size: 0.9rem; }
    .shake { animation: shake 0.5s; }
    @keyframes shake {
      0%, 100% { transform: translateX(0); }
      25% { transform: translateX(-5px); }
      75% { transform: translateX(5px); }
    }
  </style>
</head>
<body>
  <div class="container">
    <h1>Live Stream Proxy</h1>
    <p class="subtitle">Relay live streams and media through $hostname_html</p>

    <div class="form-group">
      <label for="url">Stream address:</label>
      <input type="text" id="url" placeholder="e.g. https://your-stream-server.com/live/stream" />
      <button class="btn" onclick="createProxy()">Generate proxied URL</button>
    </div>
    <div id="result"></div>

    <div class="examples">
      <h3>Examples:</h3>
      <ul>
        <li>RTMP: rtmp://live.example.com/live/streamkey</li>
        <li>HLS: https://cdn.example.com/live/stream.m3u8</li>
        <li>HTTP-FLV: https://live.example.com/live/stream.flv</li>
        <li>WebRTC: https://webrtc.example.com/room/123</li>
      </ul>
    </div>

    <div class="footer">
      <p>Live Stream Proxy</p>
    </div>
  </div>

  <script>
    var PROXY_HOST = $hostname_json;

    function createProxy() {
      var urlInput = document.getElementById('url');
      var inputUrl = urlInput.value.trim();

      if (!inputUrl) {
        urlInput.classList.add('shake');
        setTimeout(function () { urlInput.classList.remove('shake'); }, 500);
        return;
      }

      var normalizedUrl = normalizeUrl(inputUrl);
      var proxyUrl = 'https://' + PROXY_HOST + '/' + encodeURIComponent(normalizedUrl);
      showResult(proxyUrl, normalizedUrl);
      urlInput.value = '';
    }

    function normalizeUrl(url) {
      if (!/^https?:\\/\\//i.test(url) && !/^rtmps?:\\/\\//i.test(url)) {
        return 'https://' + url;
      }
      return url;
    }

    function showResult(proxyUrl, originalUrl) {
      var result = document.getElementById('result');
      result.innerHTML = '';

      var box = document.createElement('div');
      box.className = 'result';

      var title = document.createElement('h3');
      title.textContent = 'Proxied URL generated';
      box.appendChild(title);

      [['Original address:', originalUrl], ['Proxied address:', proxyUrl]].forEach(function (row) {
        var label = document.createElement('p');
        label.textContent = row[0];
        var value = document.createElement('div');
        value.className = 'url';
        value.textContent = row[1];
        box.appendChild(label);
        box.appendChild(value);
      });

      var copy = document.createElement('button');
      copy.className = 'btn';
      copy.textContent = 'Copy proxied URL';
      copy.onclick = function () { copyToClipboard(proxyUrl); };
      box.appendChild(copy);

      result.appendChild(box);
    }

    function copyToClipboard(text) {
      if (navigator.clipboard) {
        navigator.clipboard.writeText(text).then(function () {
          alert('Copied to clipboard');
        }).catch(function () { fallbackCopy(text); });
        return;
      }
      fallbackCopy(text);
    }

    function fallbackCopy(text) {
      var textarea = document.createElement('textarea');
      textarea.value = text;
      document.body.appendChild(textarea);
      textarea.select();
      document.execCommand('copy');
      document.body.removeChild(textarea);
      alert('Copied to clipboard');
    }

    document.getElementById('url').addEventListener('keydown', function (event) {
      if (event.key === 'Enter') {
        createProxy();
      }
    });
  </script>
</body>
</html>
""")


def _json_for_script(value: str) -> str:
    # "</script>" and friends must not terminate the inline script
    return (
        json.dumps(value)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )


def render_config_page(hostname: str) -> str:
    """
    Render the configuration page

    Args:
        hostname: Host the caller used to reach this service

    Returns:
        str: HTML document
    """
    return _PAGE.substitute(
        hostname_html=html.escape(hostname),
        hostname_json=_json_for_script(hostname),
    )
