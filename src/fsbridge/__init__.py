# Package Root
from fsbridge.bridge import Dispatcher, create_dispatcher, PortableStat, convert_stat
from fsbridge.gateway.server import create_app, start_server
