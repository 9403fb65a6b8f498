from colorama import init, Fore, Style

# Initialize colorama
init(autoreset=True)

LEVEL_COLORS = {
    'SUCCESS': Fore.GREEN,
    'ERROR': Fore.RED,
    'WARN': Fore.YELLOW,
    'INFO': Fore.BLUE,
}


def log(level, msg):
    color = LEVEL_COLORS.get(level)
    if color is None:
        print(msg)
        return
    print(f"{color}[{level}]{Style.RESET_ALL} {msg}")
