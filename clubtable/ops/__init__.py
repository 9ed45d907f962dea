"""Staff-facing views: floor plan, reservation actions, kitchen display"""
