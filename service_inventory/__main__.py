import sys

from service_inventory.main import main

sys.exit(main())
