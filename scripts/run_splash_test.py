import os, sys
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from garden.engine import GardenEngine
from garden.intake import new_tree_for_file, water_trees

# Plant a handful of trees on an 800x600 surface and water twice
engine = GardenEngine()
w, h = 800, 600
engine.resize(w, h)
trees = [new_tree_for_file(name, 2048, w, h) for name in ("a.png", "b.md", "c.py", "d.mp3", "e.bin")]
engine.set_trees(trees)

splash_counts = []
growth = []
for frame in range(400):
    if frame in (10, 200):
        trees = water_trees(trees)
        engine.set_trees(trees)
        engine.set_water_event(engine.water_event + 1)
    result = engine.step()
    splash_counts.append(len(result.splash))
    growth.append(max((t.current_growth for t in engine.store), default=0.0))

print('Total frames:', len(splash_counts))
print('Peak splash particles:', max(splash_counts))
print('Splash particles left:', splash_counts[-1])
print('Growth progression sample (every 50 frames):', [round(g, 3) for g in growth[::50]])
print('Strokes in last frame:', sum(len(g.strokes) for g in result.trees))
