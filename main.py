import sys
from pathlib import Path

# Fix module path
BASE_DIR = Path(__file__).resolve().parent
sys.path.append(str(BASE_DIR))

if __name__ == "__main__":
    try:
        from forgequote.cli import main
    except ImportError as e:
        print(f"Error starting application: {e}")
        print("Please ensure the 'forgequote' package is installed with its dependencies.")
        sys.exit(1)
    sys.exit(main())
