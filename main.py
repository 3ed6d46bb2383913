import argparse
import os

from simulator import config
from simulator.conversation_manager import ConversationManager
from simulator.logging_config import setup_logging


def main():
    arg_parser = argparse.ArgumentParser(description="Global Investment Simulator")
    arg_parser.add_argument(
        "--log-level",
        default=os.environ.get(config.LOG_LEVEL_ENV, config.DEFAULT_LOG_LEVEL),
        help="DEBUG, INFO, WARNING or ERROR (default: %(default)s)",
    )
    args = arg_parser.parse_args()
    setup_logging(args.log_level)

    manager = ConversationManager()

    print("Global Investment Simulator")
    print("Type 'exit' to quit.\n")

    # Print the opening prompt without waiting for user input
    print("Bot:", manager.start())

    while True:
        try:
            user_input = input("\nYou: ")
        except EOFError:
            break

        response = manager.handle_message(user_input)
        print("Bot:", response)

        if manager.context.is_complete():
            break


if __name__ == "__main__":
    main()
