#!/usr/bin/env python3
"""
Turing Machine Diagnostic - Web Interface

Paste a blueprint, run it and see the checksum and the tape around the
cursor.
"""

import sys
import os

from dotenv import load_dotenv

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_ROOT)

# Load environment variables
load_dotenv(os.path.join(PROJECT_ROOT, "config.env"))

from flask import Flask, render_template_string, jsonify, request
from turing.blueprint import BLUEPRINTS, ParseError
from turing.diagnostic import Diagnostic, DiagnosticConfig

app = Flask(__name__)

MAX_STEPS = int(os.environ.get("TURING_MAX_STEPS", "100000000"))

HTML_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Turing Machine Diagnostic</title>
    <style>
        :root {
            --bg-dark: #0a0a0f;
            --bg-card: #12121a;
            --accent: #00ff88;
            --text: #e0e0e0;
            --text-dim: #888;
            --border: #2a2a35;
            --danger: #ff4757;
        }
        body {
            background: var(--bg-dark);
            color: var(--text);
            font-family: "JetBrains Mono", monospace;
            max-width: 900px;
            margin: 2rem auto;
        }
        textarea {
            width: 100%;
            height: 28rem;
            background: var(--bg-card);
            color: var(--text);
            border: 1px solid var(--border);
            font-family: inherit;
        }
        button {
            background: var(--accent);
            border: none;
            padding: 0.5rem 1.2rem;
            font-weight: 700;
            cursor: pointer;
        }
        #result { margin-top: 1rem; white-space: pre; }
        .error { color: var(--danger); }
        .dim { color: var(--text-dim); }
    </style>
</head>
<body>
    <h1>Turing Machine Diagnostic</h1>
    <p class="dim">Paste a blueprint and take its diagnostic checksum.</p>
    <textarea id="blueprint">{{ example }}</textarea>
    <p>
        <label>Steps override <input id="steps" type="number" min="0"></label>
        <button onclick="runBlueprint()">Run</button>
    </p>
    <div id="result"></div>
    <script>
        async function runBlueprint() {
            const body = {blueprint: document.getElementById("blueprint").value};
            const steps = document.getElementById("steps").value;
            if (steps !== "") body.steps = parseInt(steps, 10);
            const resp = await fetch("/api/run", {
                method: "POST",
                headers: {"Content-Type": "application/json"},
                body: JSON.stringify(body),
            });
            const data = await resp.json();
            const out = document.getElementById("result");
            if (!resp.ok) {
                out.className = "error";
                out.textContent = data.error;
                return;
            }
            out.className = "";
            out.textContent =
                "Checksum: " + data.checksum + "\\n" +
                "Steps: " + data.steps + "  Final state: " + data.final_state +
                "  Cursor: " + data.cursor + "\\n" + data.tape;
        }
    </script>
</body>
</html>
"""


def _optional_int(data: dict, key: str):
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"'{key}' must be a non-negative integer")
    return value


@app.route('/')
def index():
    """Main page."""
    return render_template_string(HTML_TEMPLATE, example=BLUEPRINTS["example"])


@app.route('/api/examples')
def api_examples():
    """List the built-in blueprints."""
    return jsonify({
        "examples": [{"name": name, "blueprint": text} for name, text in BLUEPRINTS.items()],
    })


@app.route('/api/run', methods=['POST'])
def api_run():
    """Parse and run a blueprint."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get("blueprint"), str):
        return jsonify({"error": "Request body must be JSON with a 'blueprint' string"}), 400

    try:
        states = _optional_int(data, "states")
        steps = _optional_int(data, "steps")
        radius = _optional_int(data, "radius")
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    config = DiagnosticConfig(
        num_states=states,
        steps_override=steps,
        max_steps=MAX_STEPS,
        radius=3 if radius is None else radius,
    )

    try:
        result = Diagnostic(config).run_text(data["blueprint"])
    except ParseError as e:
        return jsonify({
            "error": str(e),
            "kind": type(e).__name__,
            "line": e.line_number,
        }), 400
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify(result.to_dict())


if __name__ == '__main__':
    port = int(os.environ.get("PORT", "8080"))
    print("\n" + "="*50)
    print("Turing Machine Diagnostic - Web Interface")
    print("="*50)
    print(f"\nOpen in your browser: http://localhost:{port}")
    print("\nPress Ctrl+C to stop\n")

    app.run(host='0.0.0.0', port=port, debug=False)
