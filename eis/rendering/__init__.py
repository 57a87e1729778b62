"""Buffer layouts, shaders, textures, vertex arrays, the renderer backend and the batching 2D renderer."""