import sys

from routeflow.cli import main

# e.g. python main.py --source 51.2562,7.1508 --dest 51.2277,6.7735 --map map.html --open
sys.exit(main())
