import subprocess
import sys
import os
from pathlib import Path

def main():
    project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    # Dashboard imports trade_navigator from src
    env = os.environ.copy()
    src_path = str(project_root / "src")
    if "PYTHONPATH" in env:
        env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = src_path

    dashboard = project_root / "src" / "trade_navigator" / "ui" / "app_streamlit.py"
    host = env.get("TRADENAV_UI_HOST", "localhost")
    port = env.get("TRADENAV_UI_PORT", "8501")

    print(f"Starting Trade Navigator dashboard (Streamlit) on {host}:{port}...")
    try:
        subprocess.run([
            sys.executable, "-m", "streamlit", "run",
            str(dashboard),
            "--server.address", host,
            "--server.port", port,
        ], env=env)
    except KeyboardInterrupt:
        print("\nDashboard stopped.")

if __name__ == "__main__":
    main()
