from llama_index.core import PromptTemplate


LIST_SHOWS_PROMPT = PromptTemplate(
    "Be succinct.\n"
    "---\n"
    "Here is a list of .NET Rocks! shows:\n"
    "{shows}\n"
    "---\n"
    "Show titles as ordered list and ask me to pick one."
)

PICK_SHOW_PROMPT = PromptTemplate(
    "Be succinct. Don't explain your reasoning.\n"
    "Select the JSON object from the array below using the given query.\n"
    'If the query is a number, it is likely the "index" property of the JSON objects.\n'
    "Answer with the JSON object only.\n"
    "---\n"
    "JSON array: {shows}\n"
    "Query: {query}\n"
    "JSON object:"
)

ASK_QUESTION_PROMPT = PromptTemplate(
    "You are a Q&A assistant who will answer questions about the transcript "
    "of the given podcast show.\n"
    "---\n"
    "Here is context from the show transcript: {transcript}\n"
    "---\n"
    "{question}"
)
