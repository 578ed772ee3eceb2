"""
LLM Othello package.

Components:
- othello: board model, legality, move application, scoring (pure functions)
- game_state: immutable GameState and play/reset transitions (forced passes, winner)
- notation/move_validator: algebraic codec and validation of free-form move proposals
- prompting/llm_client/llm_opponent: prompt build, provider transport, retry/fallback policy
- game: single-game runner shared by the console CLI and the Flask API
"""
