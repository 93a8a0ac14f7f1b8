"""
Chat interface for the learnbot conversational responder.

Interactive REPL: free text is sent to the chatbot, slash commands
teach corrections and inspect state.
"""

from dotenv import load_dotenv
load_dotenv()  # Load .env file before settings are read

import asyncio
import logging
from typing import Callable, Optional

from learnbot.config.constants import DEFAULT_CONVERSATION
from learnbot.config.settings import Settings, get_settings
from learnbot.container import LearnbotContainer
from learnbot.conversation.chatbot import ChatBot

logger = logging.getLogger(__name__)


class ChatInterface:
    """
    Interactive chat interface.

    Commands:
    - /correct <better reply> - Teach a better reply to your last input
    - /stats - Show statement and session statistics
    - /help - Show help
    - /exit - Exit

    Example session:
        > Hello
        I'm not sure how to respond to 'hello'.

        > /correct Hi there!
        Learned: 'hi there!' in response to 'hello'

        > Hello
        hi there!
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        chatbot: Optional[ChatBot] = None,
        conversation: str = DEFAULT_CONVERSATION,
        output: Callable[[str], None] = print,
    ):
        """
        Initialize chat interface.

        Args:
            settings: Settings used to build the chatbot (default: environment)
            chatbot: Prebuilt chatbot (skips the container)
            conversation: Conversation id for this REPL
            output: Where replies are written
        """
        self.settings = settings if settings is not None else get_settings()
        if chatbot is None:
            chatbot = LearnbotContainer(self.settings).create_chatbot()
        self.chatbot = chatbot
        self.conversation = conversation
        self.output = output
        self.last_input: Optional[str] = None

    def start(self) -> None:
        """Start interactive REPL."""
        logging.basicConfig(
            level=logging.DEBUG if self.settings.debug else logging.WARNING,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        asyncio.run(self._run())

    async def _run(self) -> None:
        self.output("=" * 60)
        self.output("  learnbot: Learning Conversational Responder")
        self.output(f"  [Statements persist to: {self.settings.database_path}]")
        self.output("=" * 60)

        if not await self.chatbot.initialize():
            self.output("Warning: startup failed, the bot will only answer that it is starting up.")
        self.output("(Type naturally or use /help for commands)")
        self.output("")

        while True:
            try:
                user_input = (await asyncio.to_thread(input, "> ")).strip()
            except (EOFError, KeyboardInterrupt):
                self.output("\nGoodbye!")
                break

            if not user_input:
                continue
            if not await self.handle_line(user_input):
                break

    async def handle_line(self, line: str) -> bool:
        """
        Process one line of input.

        Returns:
            False when the REPL should stop
        """
        if line.startswith("/"):
            return await self._handle_command(line)

        response = await self.chatbot.get_response(line, conversation=self.conversation)
        self.last_input = line
        self.output(response.text)
        return True

    async def _handle_command(self, command: str) -> bool:
        """Handle slash commands."""
        parts = command.split(maxsplit=1)
        cmd = parts[0].lower()
        args = parts[1].strip() if len(parts) > 1 else ""

        if cmd == "/help":
            self._show_help()
        elif cmd == "/exit":
            self.output("Goodbye!")
            return False
        elif cmd == "/correct":
            await self._cmd_correct(args)
        elif cmd == "/stats":
            await self._cmd_stats()
        else:
            self.output(f"Unknown command: {cmd}. Use /help for commands.")
        return True

    def _show_help(self) -> None:
        """Show help message."""
        self.output("""
Conversational Mode:
  Just type naturally! The bot learns which replies follow which inputs.

Commands:
  /correct <better reply>
      Teach a better reply to your last input
      Example: /correct Hi there!

  /stats
      Show statement and session statistics

  /help
      Show this help message

  /exit
      Exit the program
        """)

    async def _cmd_correct(self, args: str) -> None:
        """Handle /correct command."""
        if not args:
            self.output("Usage: /correct <better reply>")
            return
        if self.last_input is None:
            self.output("Nothing to correct yet. Say something first.")
            return

        learned = await self.chatbot.learn_correction(
            self.last_input, args, conversation=self.conversation
        )
        if learned is None:
            self.output("Could not store that correction.")
        else:
            self.output(f"Learned: {learned.text!r} in response to {learned.in_response_to!r}")

    async def _cmd_stats(self) -> None:
        """Handle /stats command."""
        stats = await self.chatbot.get_stats()
        self.output(f"Ready: {stats['ready']}")
        self.output(f"Statements: {stats['statements']}")
        self.output(f"Conversations: {stats['conversations']}")
        self.output(f"Adapters: {', '.join(stats['adapters'])}")
        self.output(f"Classifier: {stats['classifier']}")
