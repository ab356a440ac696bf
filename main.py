"""
Wordle Chat Bot - Main Entry Point

Initializes the command service and starts the Flask-SocketIO application.
"""

import threading
import time
from wordle_bot import create_app
from wordle_bot.config import Config
from wordle_bot.services.command_service import initialize_command_service
from wordle_bot.utils.game_logger import game_logger

SWEEP_INTERVAL_SECONDS = 60


def expiry_sweep_worker(store, interval=SWEEP_INTERVAL_SECONDS):
    """
    Background worker that drops in-memory games past their TTL.
    The durable store expires its own records through its TTL index.
    """
    while True:
        try:
            purged = store.purge_expired()
            if purged:
                game_logger.logger.info(f"Expiry sweep: removed {purged} stale games from memory")
        except Exception as e:
            game_logger.logger.error(f"Error in expiry sweep worker: {e}")

        time.sleep(interval)


def main():
    """Main function to initialize services and start the server."""
    command_service = None
    try:
        print("Initializing services...")

        command_service = initialize_command_service(Config)
        engine = command_service.engine
        word_stats = engine.word_bank.get_statistics()
        print(f"✓ Word bank loaded: {word_stats['main_words']} core words, "
              f"{word_stats['backup_words']} dictionary words")
        if engine.store.backend is not None:
            print("✓ Game state persisted to MongoDB")
        else:
            print("✗ MongoDB not configured, game state kept in memory only")

        print("Creating Flask application...")
        app, socketio = create_app(Config)
        print("✓ Flask application created successfully")

        sweep_thread = threading.Thread(target=expiry_sweep_worker, args=(engine.store,), daemon=True)
        sweep_thread.start()

        game_logger.logger.info("Wordle Bot Starting")

        print(f"\nStarting Wordle Bot on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print(f"Board images: {Config.RENDER_IMAGES}")
        print("=" * 50)

        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Wordle Bot shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise
    finally:
        if command_service:
            command_service.engine.shutdown()


if __name__ == '__main__':
    main()
