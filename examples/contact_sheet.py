import contactsheet as cs
import os
import sys

video = cs.Video(sys.argv[1])
print('{}: {:.1f}s at {}x{}'.format(video.path(), video.duration(), video.width(), video.height()))

sheet = video.contact_sheet(cs.GridSpec(rows=4, cols=5, cell_width=240, background='#202020'))
cs.imwrite('sample_sheet.jpg', sheet, quality=85)
print('Wrote contact sheet to {}'.format(os.path.abspath('sample_sheet.jpg')))
