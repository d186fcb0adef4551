"""
TabCalc Web API Launcher
Simple script to start the web server
"""
import logging
import os
import sys

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

print("Starting TabCalc Web API...")
print()

try:
    import config
    from api import create_app
except ImportError as e:
    print(f"Error importing modules: {e}")
    print("\nMake sure you have installed the required dependencies:")
    print("  pip install -e .")
    sys.exit(1)


def main():
    logging.basicConfig(level=config.LOG_LEVEL)
    app = create_app()
    try:
        app.run(host=config.WEB_HOST, port=config.WEB_PORT, debug=False, threaded=True)
    except OSError as e:
        print(f"Error starting server: {e}")
        print("\nTroubleshooting:")
        print(f"1. Check if another application is using port {config.WEB_PORT}")
        print("2. Set TABCALC_PORT to use a different port")
        sys.exit(1)


if __name__ == "__main__":
    main()
