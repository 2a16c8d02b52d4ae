from typing import Optional
import logging

from livekit.agents import Agent, RunContext, function_tool

from voice_agent.services.editor import QuotationEditor

logger = logging.getLogger(__name__)

INSTRUCTIONS = """You are Quotify, a voice assistant that builds sales quotations.
Ask who the quotation is for, then collect each item with its quantity and price per item.
Use the tools for every change; never keep items only in your head.
Read back the running total after each change, in one short sentence.
Quantities are whole numbers; prices are per single item.
When the user says they are done, call save_quotation and tell them the quotation number if you get one.
Keep answers brief and conversational; do not use lists or markdown."""


class QuotationAgent(Agent):
    def __init__(self, editor: QuotationEditor, instructions: str = INSTRUCTIONS) -> None:
        self.editor = editor
        super().__init__(instructions=instructions)

    async def on_enter(self):
        greeting = "Greet the user briefly and ask who the quotation is for."
        if not self.editor.draft.is_empty():
            greeting = (
                "Tell the user you still have their quotation in progress: "
                f"{self.editor.summary()} Ask what they want to change or add."
            )
        await self.session.generate_reply(instructions=greeting, allow_interruptions=True)

    @function_tool
    async def set_customer(self, context: RunContext, name: str) -> str:
        """Set the name of the customer the quotation is for."""
        logger.info("[tool] set_customer %r", name)
        return await self.editor.set_customer(name)

    @function_tool
    async def add_item(self, context: RunContext, name: str, quantity: int, rate: float) -> str:
        """Add an item to the quotation.

        Args:
            name: product or service name
            quantity: number of units, a positive whole number
            rate: price per single unit
        """
        logger.info("[tool] add_item %r x%s @ %s", name, quantity, rate)
        return await self.editor.add_item(name, quantity, rate)

    @function_tool
    async def update_item(
        self,
        context: RunContext,
        name: str,
        quantity: Optional[int] = None,
        rate: Optional[float] = None,
    ) -> str:
        """Change the quantity and/or price of an item already on the quotation."""
        logger.info("[tool] update_item %r qty=%s rate=%s", name, quantity, rate)
        return await self.editor.update_item(name, quantity, rate)

    @function_tool
    async def remove_item(self, context: RunContext, name: str) -> str:
        """Remove an item from the quotation."""
        logger.info("[tool] remove_item %r", name)
        return await self.editor.remove_item(name)

    @function_tool
    async def clear_quotation(self, context: RunContext) -> str:
        """Remove the customer and every item and start over."""
        logger.info("[tool] clear_quotation")
        return await self.editor.clear()

    @function_tool
    async def get_quotation_summary(self, context: RunContext) -> str:
        """Describe the current quotation: customer, items and total."""
        return self.editor.summary()

    @function_tool
    async def save_quotation(self, context: RunContext) -> str:
        """Save the finished quotation. Call this when the user is done."""
        logger.info("[tool] save_quotation")
        result = await self.editor.save()
        if result.get("status") != "success":
            return f"The quotation could not be saved: {result.get('message')}"
        return f"Saved. The quotation id is {result.get('quotation_id')}."
