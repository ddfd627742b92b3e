"""Shared fixtures for core unit tests"""

import pytest


LEGACY_HTML = """\
<!DOCTYPE html>
<html>
<head>
  <title>Week 1</title>
  <style>
    h1 { font-size: 2em; background-color: #FBF3DB; }
    h2 { background-color: #ffeb3b; padding: 4px; }
  </style>
</head>
<body>
  <h1>Week 1</h1>
  <p class="subtitle">Getting started</p>
  <h2>Setup</h2>
  <p>Install the <strong>toolchain</strong> first.</p>
  <div class="terminal-block"><div class="terminal-header"><span class="terminal-title">setup.sh</span></div><pre><code>npm install &amp;&amp; npm start</code></pre></div>
  <div class="video-embed">
    <iframe src="https://www.youtube.com/embed/abc123" allowfullscreen></iframe>
  </div>
  <div class="callout"><span class="callout-emoji">🔥</span> <span>Save often</span></div>
  <div class="divider"></div>
  <div class="mystery-widget"><span>Unknown</span></div>
</body>
</html>
"""


@pytest.fixture(name="legacy_html")
def legacy_html_fixture():
    return LEGACY_HTML
