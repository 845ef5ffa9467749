"""
Project Planner - projects, areas, tasks and meetings for event and property planning.
"""
