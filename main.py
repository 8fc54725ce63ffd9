import os
import argparse
import json
import logging
from tqdm import tqdm
from concurrent.futures import ThreadPoolExecutor, as_completed
from comedian.errors import ComedianError, MissingCredentialError
from comedian.jokes import create_comedian, tell_joke, tell_session_joke
from comedian.models import LLMClient
from comedian.utils import load_dotenv, load_topics

def process_topic(client, topic, model=None):
    # One agent per topic: agents must not be shared across threads
    agent = create_comedian(client=client, model=model)
    try:
        return topic, True, tell_session_joke(agent, topic)
    except Exception as e:
        return topic, False, str(e)

def run_batch(client, topics, max_workers, model=None):
    results = []
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(process_topic, client, topic, model): topic for topic in topics}

        for future in tqdm(as_completed(futures), total=len(topics), desc="Joking"):
            topic, success, result = future.result()
            if success:
                tqdm.write(f"✓ {topic}")
                results.append({"topic": topic, "joke": result})
            else:
                tqdm.write(f"✗ {topic}: Failed: {result}")
                results.append({"topic": topic, "error": result})
    return results

def run_chat(agent, read=input, write=print):
    write(f"{agent.name} is on stage. Give me a topic (/reset to start over, /quit to leave).")
    while True:
        try:
            line = read("> ").strip()
        except EOFError:
            break
        if not line:
            continue
        if line == "/quit":
            break
        if line == "/reset":
            agent.reset()
            write("Fresh set, fresh audience.")
            continue
        try:
            write(tell_session_joke(agent, line))
        except ComedianError as e:
            write(f"Sorry, I couldn't think of a joke right now: {e}")

def main(argv=None):
    parser = argparse.ArgumentParser(description="ComedianBot: family-friendly jokes from the OpenAI Responses API.")
    parser.add_argument("--topic", type=str, default=None, help="Tell one joke about this topic.")
    parser.add_argument("--topics_csv", type=str, default=None, help="CSV of topics to joke about in batch.")
    parser.add_argument("--output", type=str, default="data/jokes.json", help="Where to write batch results.")
    parser.add_argument("--chat", action="store_true", help="Interactive session with a stateful ComedianBot.")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP API.")

    parser.add_argument("--model", type=str, default=None, help="Model name (default: OPENAI_MODEL or gpt-4o-mini).")
    parser.add_argument("--max_workers", type=int, default=5, help="Maximum number of parallel batch requests.")
    parser.add_argument("--limit", type=int, default=None, help="Limit number of batch topics.")
    parser.add_argument("--host", type=str, default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--env_file", type=str, default=".env", help="Path to .env file.")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    load_dotenv(args.env_file)

    if args.serve:
        import uvicorn
        uvicorn.run("comedian.server:app", host=args.host, port=args.port)
        return 0

    if not (args.topic or args.topics_csv or args.chat):
        parser.print_help()
        return 1

    try:
        client = LLMClient(model_name=args.model)
    except MissingCredentialError as e:
        print(f"Error initializing client: {e}")
        return 1

    if args.topic:
        try:
            print(tell_joke(client, args.topic))
        except ComedianError as e:
            print(f"Error: {e}")
            return 1
        return 0

    if args.chat:
        run_chat(create_comedian(client=client, model=args.model))
        return 0

    try:
        topics = load_topics(args.topics_csv)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1

    if args.limit:
        topics = topics[:args.limit]
        print(f"Limited to {len(topics)} topics.")

    print(f"Telling {len(topics)} jokes with {args.max_workers} workers...")
    results = run_batch(client, topics, args.max_workers, model=args.model)

    output_dir = os.path.dirname(args.output)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    with open(args.output, "w", encoding="utf-8") as f:
        json.dump(results, f, ensure_ascii=False, indent=2)
    print(f"Results saved to {args.output}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
